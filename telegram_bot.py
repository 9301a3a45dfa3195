import html
import logging

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    filters,
    ContextTypes,
)
from telegram.request import HTTPXRequest

from stampgen.config import load_settings
from stampgen.errors import ResolutionError
from stampgen.formatter import format_timestamp
from stampgen.llm_client import client_from_settings
from stampgen.resolver import DateResolver
from stampgen.utils import get_zone

# --- Setup ---
settings = load_settings()

# --- Logging Setup ---
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=settings.log_level,
)
# Keep httpx logging at WARNING as it's particularly verbose
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

resolver = DateResolver(fallback=client_from_settings(settings))

# New text messages only; edits of an old message carry no `update.message`
PHRASE_FILTER = filters.UpdateType.MESSAGE & filters.TEXT & ~filters.COMMAND


def chat_time_zone(context: ContextTypes.DEFAULT_TYPE) -> str:
    return context.user_data.get("time_zone", settings.default_timezone)


def render_table(timestamp: int, time_zone: str) -> str:
    """HTML reply listing each timestamp style with its markup and rendering."""
    lines = [f"<b>UNIX timestamp:</b> <code>{timestamp}</code> ({html.escape(time_zone)})", ""]
    for row in format_timestamp(timestamp, time_zone):
        lines.append(
            f"<b>{row.style.label}</b>: <code>{html.escape(row.markup)}</code>\n{html.escape(row.text)}"
        )
    return "\n".join(lines)


# --- Bot Handlers ---
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Sends a welcome message explaining the commands."""
    user = update.effective_user
    await update.effective_message.reply_html(
        rf"Hi {user.mention_html()}! Send me a date or time like <i>next Friday at 3pm</i> "
        "and I'll give you its UNIX timestamp plus ready-to-paste chat timestamps.\n\n"
        f"Your time zone is <b>{html.escape(chat_time_zone(context))}</b>. "
        "Change it with /timezone Europe/London."
    )


async def timezone_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Shows or sets the time zone used for this chat."""
    if not context.args:
        await update.effective_message.reply_text(f"Your time zone is {chat_time_zone(context)}.")
        return
    name = context.args[0]
    try:
        zone = get_zone(name)
    except ResolutionError as e:
        await update.effective_message.reply_text(f"Error: {e.message}")
        return
    context.user_data["time_zone"] = zone.zone
    await update.effective_message.reply_text(f"Time zone set to {zone.zone}.")


async def reply_with_timestamp(update: Update, context: ContextTypes.DEFAULT_TYPE, phrase: str) -> None:
    time_zone = chat_time_zone(context)
    logger.info(f"Resolving {phrase!r} for chat {update.effective_chat.id} ({time_zone})")
    try:
        timestamp = await resolver.resolve(phrase, time_zone)
    except ResolutionError as e:
        await update.effective_message.reply_text(f"Error: {e.message}")
        return
    await update.effective_message.reply_text(render_table(timestamp, time_zone), parse_mode=ParseMode.HTML)


async def timestamp_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handles /timestamp <phrase>."""
    phrase = " ".join(context.args or [])
    if not phrase:
        await update.effective_message.reply_text("Usage: /timestamp next Friday at 3pm")
        return
    await reply_with_timestamp(update, context, phrase)


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Treats any plain text message as a phrase to resolve."""
    await reply_with_timestamp(update, context, update.effective_message.text)


def main() -> None:
    """Start the bot."""
    if not settings.telegram_bot_token:
        logger.error("TELEGRAM_BOT_TOKEN not set in environment. Please add it to your .env file.")
        return

    # Default Telegram HTTP timeouts are 5s
    request = HTTPXRequest(
        connect_timeout=10.0,
        read_timeout=60.0,
        write_timeout=60.0,
    )

    application = Application.builder().token(settings.telegram_bot_token).request(request).build()

    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("timezone", timezone_command))
    application.add_handler(CommandHandler("timestamp", timestamp_command))
    application.add_handler(MessageHandler(PHRASE_FILTER, handle_message))

    # Run the bot until the user presses Ctrl-C
    logger.info("Starting Telegram bot...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)
    logger.info("Telegram bot stopped.")


if __name__ == "__main__":
    main()
