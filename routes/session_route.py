"""FastAPI routes for login sessions."""

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from controllers.session_controller import end_session, start_session

router = APIRouter(prefix="/sessions")


class StartPayload(BaseModel):
	user_id: int


@router.post("")
async def start_session_route(request: Request, response: Response, payload: StartPayload):
	try:
		return await start_session(request, response, payload.user_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/current")
async def end_session_route(request: Request, response: Response):
	try:
		return await end_session(request, response)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
