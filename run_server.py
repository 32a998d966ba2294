import uvicorn

from graphlayout.api.server import bind_address

if __name__ == "__main__":
    host, port = bind_address()

    print(f"Graph Layout API on http://{host}:{port}")
    print(f"Docs: http://{host}:{port}/docs")

    uvicorn.run("graphlayout.api.server:app", host=host, port=port, reload=True)
