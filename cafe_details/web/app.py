"""
FastAPI Web Application - Cafe Details API
==========================================

JSON endpoints for the cafe details screen: the merged review view,
review submission and the friends list that drives the friends filter.
The signed-in user is identified by the `user_id` cookie.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import JSONResponse

from ..application import CafeDetailsSession
from ..application.ports import PlaceDetailsProvider
from ..domain.errors import CafeNotFoundError, InvalidReviewError
from ..domain.models import Cafe, UserProfile
from ..infrastructure.config import Settings, get_settings
from ..infrastructure.persistence import Database, init_database
from ..infrastructure.places import PlacesClient

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[Database] = None,
    places: Optional[PlaceDetailsProvider] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API with its collaborators.

    Anything not passed in is created from settings at startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store or init_database(str(settings.store.database_file))
        app.state.places = places or PlacesClient(settings.places)
        for issue in settings.validate():
            logger.warning(issue)
        logger.info("Cafe details API ready")
        yield
        if places is None:
            app.state.places.close()

    app = FastAPI(title="Cafe Details", description="Merged cafe reviews", lifespan=lifespan)
    app.state.settings = settings

    # ── Helpers ────────────────────────────────────────────────────

    def _store(request: Request) -> Database:
        return request.app.state.store

    def _get_current_user(request: Request) -> Optional[UserProfile]:
        """Get signed-in user from cookie, or None."""
        uid = request.cookies.get("user_id")
        if not uid:
            return None
        return _store(request).get_user(uid)

    def _resolve_cafe(request: Request, place_id: str, name: Optional[str],
                      vicinity: Optional[str], photo_reference: Optional[str]) -> Cafe:
        """Use the caller's cafe record when given, else the stored one."""
        store = _store(request)
        if name:
            cafe = Cafe(place_id=place_id, name=name, vicinity=vicinity or "",
                        photo_reference=photo_reference or None)
            store.save_cafe(cafe)
            return cafe

        cafe = store.get_cafe(place_id)
        if not cafe:
            raise CafeNotFoundError(f"Unknown cafe: {place_id}")
        return cafe

    @app.exception_handler(CafeNotFoundError)
    async def cafe_not_found(request: Request, exc: CafeNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # ── Session routes ─────────────────────────────────────────────

    @app.post("/api/login")
    def login(request: Request, user_id: str = Form(...)):
        user = _store(request).get_user(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        response = JSONResponse({"user_id": user.user_id, "email": user.email})
        response.set_cookie(key="user_id", value=user.user_id)
        return response

    @app.post("/api/logout")
    def logout():
        response = JSONResponse({"ok": True})
        response.delete_cookie("user_id")
        return response

    # ── Cafe routes ────────────────────────────────────────────────

    @app.get("/api/cafes/{place_id}")
    def cafe_details(
        request: Request,
        place_id: str,
        name: Optional[str] = None,
        vicinity: Optional[str] = None,
        photo_reference: Optional[str] = None,
    ):
        cafe = _resolve_cafe(request, place_id, name, vicinity, photo_reference)
        session = CafeDetailsSession(
            cafe,
            store=_store(request),
            places=request.app.state.places,
            user=_get_current_user(request),
            vocabulary=settings.keywords.vocabulary,
        )
        with session:
            if not session.wait_for_remote(timeout=settings.places.timeout_seconds):
                logger.warning(f"Place details for {place_id} still pending, responding without them")
            return session.snapshot().to_dict()

    @app.post("/api/cafes/{place_id}/reviews", status_code=201)
    def submit_review(
        request: Request,
        place_id: str,
        rating: float = Form(...),
        text: str = Form(""),
    ):
        user = _get_current_user(request)
        cafe = _store(request).get_cafe(place_id) or Cafe(place_id=place_id)
        session = CafeDetailsSession(cafe, store=_store(request),
                                     places=request.app.state.places, user=user)
        try:
            review_id = session.submit_review(text, rating)
        except InvalidReviewError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return {"id": review_id}

    # ── User routes ────────────────────────────────────────────────

    @app.post("/api/users", status_code=201)
    def create_user(
        request: Request,
        user_id: str = Form(...),
        email: str = Form(""),
        display_name: str = Form(""),
    ):
        if not _store(request).create_user(user_id, email, display_name):
            raise HTTPException(status_code=409, detail="User already exists")
        return {"user_id": user_id}

    @app.get("/api/users/{user_id}/friends")
    def list_friends(request: Request, user_id: str):
        user = _store(request).get_user(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return {"user_id": user_id, "friends": user.friends}

    @app.post("/api/users/{user_id}/friends")
    def add_friend(request: Request, user_id: str, friend_id: str = Form(...)):
        store = _store(request)
        if not store.get_user(user_id):
            raise HTTPException(status_code=404, detail="User not found")
        added = store.add_friend(user_id, friend_id)
        return {"user_id": user_id, "friend_id": friend_id, "added": added}

    @app.delete("/api/users/{user_id}/friends/{friend_id}")
    def remove_friend(request: Request, user_id: str, friend_id: str):
        removed = _store(request).remove_friend(user_id, friend_id)
        return {"user_id": user_id, "friend_id": friend_id, "removed": removed}

    # ── Health ─────────────────────────────────────────────────────

    @app.get("/api/health")
    def health():
        return {"status": "ok", "warnings": settings.validate()}

    return app


app = create_app()
