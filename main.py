from dotenv import load_dotenv
import uvicorn

from laptop_catalog.config import get_config

load_dotenv()


if __name__ == "__main__":
    config = get_config()
    uvicorn.run(
        "laptop_catalog.main:app",
        host=config.server.host,
        port=config.server.port,
    )
