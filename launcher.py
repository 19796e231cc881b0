from dotenv import load_dotenv
load_dotenv(".env")

import info
from rankbot.bot import RankBot

bot = RankBot()

if __name__ == "__main__":
    bot.run(info.__version__)
