#!/usr/bin/python
import logging

import discord
from discord.ext import commands

from wordle_league.core.aliases import AliasResolver, MemberDirectory
from wordle_league.core.config import load_settings
from wordle_league.core.dates import GameDates
from wordle_league.core.runtime import catchup, ingest_message, is_summary_source, post_leaderboard, post_player_stats
from wordle_league.core.scheduler import schedule_daily, schedule_every
from wordle_league.core.store import ResultStore
from wordle_league.wordle.game import WordleGame

CMD_PREFIX = '!'

SETTINGS = load_settings()

# Logging setup
logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

intents = discord.Intents(messages=True, message_content=SETTINGS.enable_ingest, guilds=True, members=True)
bot = commands.Bot(command_prefix=CMD_PREFIX, intents=intents)

GAME = WordleGame()
DATES = GameDates(tz=SETTINGS.tz)
STORE = ResultStore.open(SETTINGS.db_path)
STORE.seed_aliases(SETTINGS.aliases_file)
DIRECTORY = MemberDirectory()
RESOLVER = AliasResolver(STORE, DIRECTORY)


def refresh_members():
    members = [m for g in bot.guilds for m in g.members]
    DIRECTORY.refresh(members)
    for m in members:
        STORE.set_display_name(str(m.id), m.display_name)


async def post_daily_leaderboard():
    channel = bot.get_channel(SETTINGS.leaderboard_channel_id)
    if channel is None:
        logger.warning("post_daily_leaderboard: channel %s not found", SETTINGS.leaderboard_channel_id)
        return
    await post_leaderboard(channel, STORE, GAME, SETTINGS.leaderboard_limit, SETTINGS.send_results)


@bot.event
async def on_ready():
    logger.info("Bot is ready. Guilds: %s", [g.name for g in bot.guilds])
    refresh_members()
    if SETTINGS.enable_ingest:
        input_channel = bot.get_channel(SETTINGS.channel_id)
        if input_channel is not None:
            await catchup(input_channel, SETTINGS, STORE, RESOLVER, GAME, DATES)
    post_time = SETTINGS.leaderboard_post_time
    schedule_daily(post_daily_leaderboard, job_id="daily_leaderboard",
                   hour=post_time.hour, minute=post_time.minute, tz=SETTINGS.tz)
    schedule_every(refresh_members, job_id="refresh_members", minutes=SETTINGS.member_refresh_minutes)


@bot.command()
async def ping(ctx):
    await ctx.send("Pong!")

@bot.command()
async def leaderboard(ctx, limit: int = None):
    logger.info("!leaderboard invoked by %s in #%s", ctx.author, getattr(ctx.channel, "name", ctx.channel))
    await post_leaderboard(ctx.channel, STORE, GAME, limit or SETTINGS.leaderboard_limit)

@bot.command()
async def stats(ctx, member: discord.Member = None):
    member = member or ctx.author
    logger.info("!stats invoked by %s for %s", ctx.author, member)
    await post_player_stats(ctx.channel, STORE, GAME, str(member.id), member.display_name)


@bot.event
async def on_message(msg):
    if msg.author == bot.user:
        return
    if SETTINGS.enable_ingest and is_summary_source(msg, SETTINGS):
        logger.debug(
            "on_message(app): channel=%s author=%s content='%s...'",
            getattr(getattr(msg, "channel", None), "name", None),
            getattr(getattr(msg, "author", None), "name", None),
            (getattr(msg, "content", "") or "")[:120]
        )
        count = await ingest_message(msg, STORE, RESOLVER, GAME, DATES)
        if count:
            logger.info("on_message: ingested %s results from message id=%s", count, getattr(msg, "id", None))
    # Always let command handling proceed (so humans can use !commands)
    await bot.process_commands(msg)


if __name__ == "__main__":
    bot.run(SETTINGS.discord_token)
