"""Game-related API endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from ...config import Settings
from ...exceptions import MarketplaceError
from ...storage.database import DatabaseManager
from ..dependencies import get_db, get_settings, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/games", tags=["games"])


class CreateGameRequest(BaseModel):
    sport_type: str
    name: str
    game_time: datetime


@router.get("")
def list_games(db: DatabaseManager = Depends(get_db)):
    """List games still open for trading."""
    try:
        games = db.games.list_open_games()
        return {"games": [game.to_dict() for game in games]}

    except Exception as e:
        logger.error(f"Error listing games: {e}")
        raise HTTPException(status_code=500, detail="Failed to list games")


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_game(
    req: CreateGameRequest,
    db: DatabaseManager = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a game (admin). Trading closes LISTING_CUTOFF_MINUTES before game time."""
    try:
        game = db.games.create_game(
            req.sport_type, req.name, req.game_time, settings.listing_cutoff_minutes
        )
        return game.to_dict()

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error creating game {req.name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create game")


@router.delete("/{game_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_game(game_id: str, db: DatabaseManager = Depends(get_db)):
    """Delete a game without listings (admin)."""
    try:
        db.games.delete_game(game_id)
        return Response(status_code=204)

    except (HTTPException, MarketplaceError):
        raise
    except Exception as e:
        logger.error(f"Error deleting game {game_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete game")
