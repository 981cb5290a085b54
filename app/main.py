from dotenv import load_dotenv

from server import server

load_dotenv()

# ASGI entry point: uvicorn main:server_app
server_app = server.handler
