# ------------------------------- MVP Score ------------------------------- #
# Share of the window's totals, weighted, then scaled to 0..100
MVP_WEIGHTS = {
	"survival_time": 0.2,
	"damage": 0.3,
	"kills": 0.5,
}
MVP_MULTIPLIER = 100
MVP_DECIMALS = 2


# ----------------------------- Placeholders ----------------------------- #
UNKNOWN_TEAM = "Unknown Team"
UNKNOWN_PLAYER = "Unknown Player"
UNKNOWN_UID = "N/A"


# ----------------------------- Response Messages ----------------------------- #
INGEST_SUCCESS_MESSAGE = "Game data successfully updated!"
DUPLICATE_GAME_MESSAGE = "Game data already exists"
