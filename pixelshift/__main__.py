import logging

from .settings import Settings
from .ui import PixelShiftApp


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = PixelShiftApp(settings=settings)
    app.mainloop()


if __name__ == "__main__":
    main()
