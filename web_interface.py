#!/usr/bin/env python3
"""
Web Interface for the gear-mode command interpreter
Lets an automated caller submit command lines over HTTP or WebSocket
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Dict, Set, Optional, Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uvicorn

from config_manager import GearModeConfig
from gearmode_commands import SelfCommandDispatcher


class CommandRequest(BaseModel):
	command: str


class GearModeWebInterface:
	"""Bridge between web clients and one command session"""

	def __init__(self, dispatcher: SelfCommandDispatcher, config: Optional[GearModeConfig] = None):
		self.dispatcher = dispatcher
		self.session = dispatcher.session
		self.config = config
		self.websocket_clients: Set[WebSocket] = set()
		self.command_history = []

		# One command at a time, end to end
		self.command_lock = asyncio.Lock()

		self.logger = logging.getLogger(__name__)
		self.logger.info(f"Web interface ready with hooks: {self.session.hooks.installed() or 'none'}")

	async def run_command(self, line: str) -> Dict[str, Any]:
		"""Dispatch one command line and describe the outcome"""
		async with self.command_lock:
			result = self.dispatcher.dispatch(line)

		record = {
			"command": line,
			"timestamp": datetime.now().isoformat(),
			"recognized": result is not None,
			"result": result.to_dict() if result is not None else None,
		}
		self.command_history.append(record)
		if len(self.command_history) > 1000:
			self.command_history = self.command_history[-500:]  # Keep last 500

		return {**record, "state": self.session.state.to_dict()}

	def get_messages(self) -> list:
		messages = getattr(self.session.collaborators, "messages", [])
		return [m.to_dict() for m in messages]

	def get_current_status(self) -> Dict[str, Any]:
		return {
			"state": self.session.state.to_dict(),
			"debug_mode": self.session.debug_mode,
			"hooks": self.session.hooks.installed(),
			"commands": [name for name, _ in self.dispatcher.list_commands()],
			"connected_clients": len(self.websocket_clients),
			"timestamp": datetime.now().isoformat(),
		}

	async def connect_websocket(self, websocket: WebSocket):
		"""Accept a client and send it the current state"""
		await websocket.accept()
		self.websocket_clients.add(websocket)
		await self.send_to_client(websocket, {
			"type": "initial_status",
			"data": self.get_current_status()
		})
		self.logger.info(f"New WebSocket client connected. Total: {len(self.websocket_clients)}")

	def disconnect_websocket(self, websocket: WebSocket):
		self.websocket_clients.discard(websocket)
		self.logger.info(f"WebSocket client disconnected. Total: {len(self.websocket_clients)}")

	async def send_to_client(self, websocket: WebSocket, message: Dict):
		await websocket.send_text(json.dumps(message))

	async def broadcast_to_all(self, message: Dict):
		"""Send to every client, dropping the ones that fail"""
		if not self.websocket_clients:
			return

		disconnected = set()
		for client in self.websocket_clients.copy():
			try:
				await self.send_to_client(client, message)
			except (WebSocketDisconnect, RuntimeError) as e:
				self.logger.warning(f"Failed to broadcast to client: {e}")
				disconnected.add(client)

		# Clean up disconnected clients
		self.websocket_clients -= disconnected

	async def handle_client_message(self, websocket: WebSocket, data: Dict):
		"""Route one JSON message from a WebSocket client"""
		message_type = data.get("type")

		if message_type == "command":
			line = str(data.get("command", "")).strip()
			if not line:
				await self.send_to_client(websocket, {"type": "error", "message": "Empty command"})
				return
			outcome = await self.run_command(line)
			await self.broadcast_to_all({"type": "command_result", "data": outcome})

		elif message_type == "get_state":
			await self.send_to_client(websocket, {
				"type": "state",
				"data": self.session.state.to_dict()
			})

		else:
			await self.send_to_client(websocket, {
				"type": "error",
				"message": f"Unknown message type: {message_type}"
			})


def create_app(web_interface: GearModeWebInterface) -> FastAPI:
	"""FastAPI application bound to one web interface instance"""
	app = FastAPI(title="Gear Mode Web Interface", version="1.0.0")

	app.add_middleware(
		CORSMiddleware,
		allow_origins=["*"],
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	@app.get("/api/status")
	async def get_status():
		return web_interface.get_current_status()

	@app.get("/api/state")
	async def get_state():
		return web_interface.session.state.to_dict()

	@app.get("/api/modes")
	async def get_modes():
		return web_interface.session.registry.to_dict()

	@app.get("/api/messages")
	async def get_messages():
		return {"messages": web_interface.get_messages()}

	@app.post("/api/command")
	async def post_command(request: CommandRequest):
		line = request.command.strip()
		if not line:
			raise HTTPException(status_code=400, detail="Empty command")
		outcome = await web_interface.run_command(line)
		await web_interface.broadcast_to_all({"type": "command_result", "data": outcome})
		return outcome

	@app.websocket("/ws")
	async def websocket_endpoint(websocket: WebSocket):
		await web_interface.connect_websocket(websocket)
		try:
			while True:
				data = await websocket.receive_text()
				try:
					message = json.loads(data)
				except json.JSONDecodeError:
					await web_interface.send_to_client(websocket, {
						"type": "error",
						"message": "Invalid JSON received"
					})
					continue
				if not isinstance(message, dict):
					await web_interface.send_to_client(websocket, {
						"type": "error",
						"message": "Expected a JSON object"
					})
					continue
				await web_interface.handle_client_message(websocket, message)
		except WebSocketDisconnect:
			web_interface.disconnect_websocket(websocket)

	return app


def run_web_server(dispatcher: SelfCommandDispatcher, config: Optional[GearModeConfig] = None):
	"""Run the web server (blocks until Ctrl+C)"""
	config = config or GearModeConfig()
	web_interface = GearModeWebInterface(dispatcher, config)
	app = create_app(web_interface)

	host, port = config.web.host, config.web.port
	print(f"🌐 Starting Gear Mode Web Interface on http://{host}:{port}")
	print(f"📡 WebSocket endpoint: ws://{host}:{port}/ws")

	log_level = "debug" if config.console.verbose else "info"
	uvicorn.run(
		app,
		host=host,
		port=port,
		log_level=log_level,
		access_log=not config.console.quiet
	)
