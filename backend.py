"""FastAPI backend powering the Aviary Battler UI."""
from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from aviary_battler import GameState, Phase, Rarity, UnitCatalog
from aviary_battler.config import RARITY_COST

logger = logging.getLogger(__name__)

app = FastAPI(title="Aviary Battler API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GameManager:
    """Keeps track of running games and websocket subscribers."""

    def __init__(self, step_delay: float = 0.7) -> None:
        self.active_games: Dict[str, GameState] = {}
        self.connections: Dict[str, List[WebSocket]] = defaultdict(list)
        self.catalog = UnitCatalog()
        self.step_delay = step_delay

    def create_game(self, seed: Optional[int] = None) -> str:
        game_id = str(uuid.uuid4())
        self.active_games[game_id] = GameState(seed=seed, catalog=self.catalog)
        logger.info("Created game %s (seed=%s)", game_id, seed)
        return game_id

    def get_game(self, game_id: str) -> GameState:
        game = self.active_games.get(game_id)
        if not game:
            raise HTTPException(status_code=404, detail="Game not found")
        return game

    def serialize(self, game_id: str) -> Dict[str, Any]:
        game = self.get_game(game_id)
        state = game.to_public_dict()
        state["game_id"] = game_id
        return state

    async def broadcast(self, game_id: str, payload: Dict[str, Any]) -> None:
        recipients = self.connections.get(game_id, [])
        dead: List[WebSocket] = []
        for ws in recipients:
            try:
                await ws.send_json(payload)
            except (WebSocketDisconnect, RuntimeError):
                dead.append(ws)
        for ws in dead:
            recipients.remove(ws)

    async def apply_action(self, game_id: str, action: Dict[str, Any]) -> Dict[str, Any]:
        game = self.get_game(game_id)
        action_type = action.get("type")

        if action_type == "buy":
            success, message = game.purchase(_action_index(action, "offer_idx"))
        elif action_type == "end_shop":
            success, message = game.end_shop_phase()
        elif action_type == "pick_reward":
            success, message = game.pick_reward(_action_index(action, "choice_idx"))
        elif action_type == "advance":
            success, message = game.advance()
        else:
            raise HTTPException(status_code=400, detail=f"Unknown action '{action_type}'")

        result = {"success": success, "message": message}
        await self.broadcast(
            game_id,
            {
                "type": "action_result",
                "action": action,
                "result": result,
                "game_state": self.serialize(game_id),
            },
        )
        return result

    async def run_battle(self, game_id: str) -> Dict[str, Any]:
        """Step the battle with a presentation delay between attacks."""

        game = self.get_game(game_id)
        if game.phase is Phase.SHOP:
            success, message = game.end_shop_phase()
            if not success:
                return {"success": False, "message": message}
        await self.broadcast(game_id, {"type": "battle_start", "round": game.round})

        while game.phase is Phase.BATTLE and not game.is_game_over():
            await asyncio.sleep(self.step_delay)
            _, message = game.advance()
            attack = game.last_attack
            await self.broadcast(
                game_id,
                {
                    "type": "attack",
                    "attack": attack.to_dict() if attack else None,
                    "message": message,
                    "game_state": self.serialize(game_id),
                },
            )

        await self.broadcast(
            game_id,
            {
                "type": "battle_end",
                "message": game.message,
                "game_state": self.serialize(game_id),
            },
        )
        return {"success": True, "message": game.message}


def _action_index(action: Dict[str, Any], key: str) -> int:
    try:
        return int(action.get(key, -1))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"'{key}' must be an integer") from None


manager = GameManager()


class ActionRequest(BaseModel):
    game_id: str
    action: Dict[str, Any]


class CreateGameRequest(BaseModel):
    seed: Optional[int] = None


@app.post("/api/game/create")
async def create_game(request: CreateGameRequest) -> Dict[str, Any]:
    game_id = manager.create_game(seed=request.seed)
    return {"game_id": game_id, "game_state": manager.serialize(game_id)}


@app.get("/api/game/{game_id}")
async def get_game(game_id: str) -> Dict[str, Any]:
    return manager.serialize(game_id)


@app.post("/api/game/action")
async def execute_action(request: ActionRequest) -> Dict[str, Any]:
    return await manager.apply_action(request.game_id, request.action)


@app.post("/api/game/{game_id}/battle")
async def run_battle(game_id: str) -> Dict[str, Any]:
    return await manager.run_battle(game_id)


@app.get("/api/units")
async def get_units() -> Dict[str, Any]:
    return {
        "units": [
            {
                "id": template.id,
                "name": template.name,
                "scientific_name": template.scientific_name,
                "rarity": template.rarity.label,
                "attack": template.attack,
                "health": template.health,
                "cost": RARITY_COST.get(template.rarity.label, 1),
            }
            for template in manager.catalog.templates.values()
        ],
        "rarities": [rarity.label for rarity in Rarity],
    }


@app.websocket("/ws/game/{game_id}")
async def websocket_endpoint(websocket: WebSocket, game_id: str) -> None:
    await websocket.accept()
    if game_id not in manager.active_games:
        await websocket.close(code=4404)
        return
    manager.connections[game_id].append(websocket)
    await websocket.send_json({"type": "connected", "game_state": manager.serialize(game_id)})

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.connections[game_id].remove(websocket)


@app.get("/")
async def root() -> Dict[str, Any]:
    return {
        "name": "Aviary Battler API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "websocket": "/ws/game/{game_id}",
            "create_game": "POST /api/game/create",
            "action": "POST /api/game/action",
            "battle": "POST /api/game/{game_id}/battle",
            "units": "GET /api/units",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
