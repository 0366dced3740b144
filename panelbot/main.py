import asyncio
import logging

from aiogram import Bot, Dispatcher, F
from aiogram.fsm.storage.memory import MemoryStorage

from panelcore.auth_client import AuthClient
from panelcore.config import settings as core_settings
from panelcore.core_client import CoreClient
from panelcore.poller import StatusPoller
from panelcore.redis_repo import RedisRepo
from panelcore.service import PanelController
from panelcore.session_store import SessionStore

from .handlers import router
from .presenter import TelegramPresenter


logging.basicConfig(level=core_settings.LOG_LEVEL)


async def main():
    from .config import settings

    bot = Bot(token=settings.BOT_TOKEN)
    storage = MemoryStorage()
    dp = Dispatcher(storage=storage)

    repo = RedisRepo(core_settings.REDIS_HOST, core_settings.REDIS_PORT, core_settings.REDIS_DB)
    store = SessionStore(repo, core_settings.SESSION_MAX_AGE_SEC)
    auth = AuthClient(core_settings.BACKEND_URL, core_settings.HTTP_TIMEOUT_SEC)
    core = CoreClient(core_settings.BACKEND_URL, core_settings.HTTP_TIMEOUT_SEC)
    presenter = TelegramPresenter(bot, settings.PANEL_CHAT_ID, storage)

    controller = PanelController(
        store,
        auth,
        core,
        presenter,
        default_ram=core_settings.DEFAULT_RAM,
        ram_choices=core_settings.RAM_CHOICES,
        login_redirect_delay=core_settings.LOGIN_REDIRECT_DELAY_SEC,
        expired_logout_delay=core_settings.EXPIRED_LOGOUT_DELAY_SEC,
    )
    poller = StatusPoller(core, presenter, core_settings.STATUS_INTERVAL_SEC)

    dp["controller"] = controller
    dp["poller"] = poller

    router.message.filter(F.chat.id == settings.PANEL_CHAT_ID)
    router.callback_query.filter(F.message.chat.id == settings.PANEL_CHAT_ID)
    dp.include_router(router)

    poller.start()
    await controller.start()

    try:
        await dp.start_polling(bot)
    finally:
        await poller.stop()
        await controller.join()
        await repo.close()
        await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
