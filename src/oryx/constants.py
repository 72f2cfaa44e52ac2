"""Static addresses and endpoints."""

# Yearn strategies deployed on Stargate pools (USDC, USDT)
STARGATE_STRATEGY_ADDRESSES: list[str] = [
    "0x7C85c0a8E2a45EefF98A10b6037f70daf714B7cf",
    "0xeAD650E673F497CdBE365F7a855273BbB468e454",
]

STARGATE_COMMITTEE_TELEGRAM_CHAT_ID = -753837580

INFURA_MAINNET_URL = "https://mainnet.infura.io/v3/{api_key}"
TELEGRAM_API_URL = "https://api.telegram.org"

# Raw amounts at or above this bound are rejected rather than truncated
MAX_RAW_AMOUNT = 2**128
MAX_TOKEN_DECIMALS = 255

REPORT_TITLE = "Daily Stargate Report"
REPORT_SEPARATOR = "--------------"
