"""
Basic usage example of fastapi-incoming-request.

Demonstrates:
- Receiving an IncomingRequest as a FastAPI dependency
- Bracket-notation query and cookie params
- Environment snapshot via server_params
"""

from fastapi import Depends, FastAPI

from fastapi_incoming_request import IncomingRequest, incoming_request_dependency

app = FastAPI(title="Basic Incoming Request Example")


@app.get("/search")
async def search(incoming: IncomingRequest = Depends(incoming_request_dependency())):
    """Try /search?filter[status]=open&tags[]=a&tags[]=b"""
    return {
        "url": incoming.url,
        "query": incoming.query_params,
        "cookies": incoming.cookie_params,
        "client": incoming.server_params.get("REMOTE_ADDR"),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
