"""
Main entry point for the Telegram Weather Bot.
Initializes all components and starts the bot.
"""

import asyncio
import logging
import signal

from telegram import Update
from telegram.ext import Application, MessageHandler, filters
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import pytz

from .config import Config, describe
from .handlers import CommandHandlers, WeatherDispatcher, register_commands
from .weather import OpenWeatherClient, WeatherCache

logger = logging.getLogger(__name__)


class WeatherBot:
    """
    Main bot class that coordinates all components.
    """
    
    def __init__(self):
        """Initialize the bot."""
        self.cache: WeatherCache = None
        self.openweather: OpenWeatherClient = None
        self.dispatcher: WeatherDispatcher = None
        self.scheduler: AsyncIOScheduler = None
        self.application: Application = None
        self._running = False
    
    async def initialize(self) -> None:
        """
        Initialize all bot components.
        Missing or invalid configuration stops startup with ValueError.
        """
        loaded = Config.load_file()
        
        Config.setup_logging()
        if loaded:
            logger.info(f"Loaded config file {Config.CONFIG_PATH}")
        
        errors = Config.validate()
        if errors:
            for error in errors:
                logger.error(f"Config error: {error}")
            raise ValueError("Invalid configuration. Check .env or the TOML config file.")
        
        logger.debug(f"Using OpenWeather key {describe(Config.OPENWEATHER_API_KEY)}")
        
        # Cache entries must outlive their bucket (checked in validate)
        self.cache = WeatherCache(default_ttl=Config.CACHE_TTL_MINUTES * 60)
        
        self.openweather = OpenWeatherClient(
            Config.OPENWEATHER_API_KEY,
            self.cache,
            country_code=Config.COUNTRY_CODE,
            language=Config.LANGUAGE,
            timeout=Config.REQUEST_TIMEOUT_SECONDS,
            bucket_seconds=Config.CACHE_BUCKET_MINUTES * 60
        )
        
        self.dispatcher = WeatherDispatcher(
            self.openweather,
            timeout=Config.REQUEST_TIMEOUT_SECONDS
        )
        
        # Build telegram application
        self.application = (
            Application.builder()
            .token(Config.TELEGRAM_BOT_TOKEN)
            .build()
        )
        
        self._setup_handlers()
        self._setup_scheduler()
        
        logger.debug("Weather Bot initialized successfully")
    
    def _setup_handlers(self) -> None:
        """Setup Telegram message handlers."""
        cmd_handlers = CommandHandlers(self.dispatcher)
        
        # Commands and free text share one path: aliases are plain text tokens
        self.application.add_handler(
            MessageHandler(filters.TEXT, cmd_handlers.handle_message)
        )
        
        logger.debug("Message handlers registered")
    
    def _setup_scheduler(self) -> None:
        """Setup periodic cache sweep."""
        self.scheduler = AsyncIOScheduler(timezone=pytz.UTC)
        
        self.scheduler.add_job(
            self._scheduled_cache_sweep,
            trigger=IntervalTrigger(minutes=Config.CACHE_SWEEP_MINUTES),
            id="cache_sweep",
            name="Weather cache sweep",
            replace_existing=True
        )
        
        logger.debug(
            f"Scheduler configured: cache sweep every {Config.CACHE_SWEEP_MINUTES} minutes"
        )
    
    async def _scheduled_cache_sweep(self) -> None:
        """Scheduled job to drop expired cache entries."""
        try:
            removed = self.cache.delete_expired()
            logger.debug(f"Cache sweep completed: {removed} entries removed, {len(self.cache)} left")
        except Exception as e:
            logger.error(f"Error in scheduled cache sweep: {e}")
    
    async def start(self) -> None:
        """Start the bot."""
        if self._running:
            logger.warning("Bot is already running")
            return
        
        self._running = True
        logger.debug("Starting Weather Bot...")
        
        self.scheduler.start()
        
        await self.application.initialize()
        await self.application.start()
        
        logger.info(f"Bot @{self.application.bot.username} started")
        
        await register_commands(self.application.bot)
        
        await self.application.updater.start_polling(
            allowed_updates=Update.ALL_TYPES,
            timeout=60
        )
        
        logger.debug("Weather Bot is running")
        
        # Keep running until stopped
        while self._running:
            await asyncio.sleep(1)
    
    async def stop(self) -> None:
        """Stop the bot gracefully."""
        logger.debug("Stopping Weather Bot...")
        self._running = False
        
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        
        # Stop bot (updater may already be stopped)
        if self.application:
            try:
                if self.application.updater and self.application.updater.running:
                    await self.application.updater.stop()
                if self.application.running:
                    await self.application.stop()
                await self.application.shutdown()
            except RuntimeError as e:
                logger.debug(f"Telegram application already stopped: {e}")
        
        if self.openweather:
            await self.openweather.close()
        
        logger.debug("Weather Bot stopped")


async def main() -> None:
    """Main entry point."""
    bot = WeatherBot()
    
    # Setup signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()
    
    def signal_handler():
        logger.debug("Received shutdown signal")
        asyncio.create_task(bot.stop())
    
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)
    
    try:
        await bot.initialize()
        await bot.start()
    except KeyboardInterrupt:
        logger.debug("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise
    finally:
        await bot.stop()


def run() -> None:
    """Run the bot (blocking)."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
