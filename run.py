import asyncio
import logging

from linkscroll.demo.app import DemoApp
from linkscroll.settings import load_settings

def main():
    cfg = load_settings()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(DemoApp(cfg).run())

if __name__ == "__main__":
    main()
