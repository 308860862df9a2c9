"""
Telegram bot handlers.
Feeds every text message (commands included) through the dispatcher.
"""

import logging

from telegram import Bot, BotCommand, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from ..config import BOT_COMMANDS
from ..utils import retry_with_backoff
from .dispatcher import WeatherDispatcher

logger = logging.getLogger(__name__)


class CommandHandlers:
    """Handles inbound Telegram messages."""
    
    def __init__(self, dispatcher: WeatherDispatcher):
        """
        Initialize command handlers.
        
        Args:
            dispatcher: Weather dispatcher
        """
        self.dispatcher = dispatcher
    
    async def handle_message(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """
        Handle a text message or command.
        Delivery failures are logged, never retried.
        """
        message = update.effective_message
        if message is None or not message.text:
            return
        
        reply = await self.dispatcher.handle_text(message.text)
        if reply is None:
            return
        
        chat_id = update.effective_chat.id
        try:
            await context.bot.send_message(
                chat_id=chat_id,
                text=reply.text,
                parse_mode=reply.parse_mode
            )
        except TelegramError as e:
            logger.error(f"Failed to send reply to chat {chat_id}: {e}")


async def register_commands(
    bot: Bot,
    attempts: int = 3,
    base_delay: float = 2.0
) -> bool:
    """
    Publish the command menu.
    
    Retried with backoff; failure is logged and does not stop the bot.
    
    Args:
        bot: Telegram bot
        attempts: Maximum number of attempts
        base_delay: First retry delay in seconds
    
    Returns:
        True if the commands were set
    """
    commands = [BotCommand(command, description) for command, description in BOT_COMMANDS]
    
    async def _set_commands() -> bool:
        if not await bot.set_my_commands(commands):
            raise TelegramError("setMyCommands returned false")
        return True
    
    try:
        await retry_with_backoff(
            _set_commands,
            attempts=attempts,
            base_delay=base_delay,
            retry_on=(TelegramError,),
            description="Command registration"
        )
    except TelegramError:
        logger.error(f"Could not set bot commands after {attempts} attempts")
        return False
    
    logger.info("Bot commands registered")
    return True
