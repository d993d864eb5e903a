import uvicorn

from playlist_manager.core.config import HOST, PORT


def main() -> None:
    uvicorn.run("playlist_manager.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
