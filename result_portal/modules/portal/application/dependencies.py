"""Portal module application dependencies."""

from typing import NoReturn

from result_portal.modules.portal.application.controller import AppController


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_app_controller() -> AppController:
    _missing_dependency("AppController")
