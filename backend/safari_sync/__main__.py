"""Run the server: python -m safari_sync"""

import uvicorn

from safari_sync.config import Config


def main():
    uvicorn.run("safari_sync.main:app", host=Config.HOST, port=Config.PORT)


if __name__ == "__main__":
    main()
