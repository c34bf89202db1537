# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
config.py — Shared configuration constants for the pyramid simulation.

Every tunable game-balance number lives here.  Formulas in the layer modules
read these names at call time, so tests and the CLI can override them with a
plain assignment (or pytest's monkeypatch) without touching the algorithms.
"""

# ── Pyramid structure ───────────────────────────────────────────────────
LEVELS                      = 8     # 1+2+4+…+128 = 255 nodes
PLAYER_START_LEVEL_MIN      = 6     # player starts at this level or deeper (0 = top)
PLAYER_START_DOWNLINE_SLOTS = 2     # direct children kept under the player at start
MAX_LEVEL                   = 10    # nothing is ever inserted deeper than this
MAX_NODES                   = 600   # hard ceiling on graph growth

# ── Bot starting stats (exponential by distance from the bottom) ─────────
BOT_BASE_MONEY        = 100
BOT_MONEY_SCALE_BASE  = 2.5
BOT_BASE_INCOME       = 1.0
BOT_INCOME_SCALE_BASE = 2.0
BOT_RANDOM_MONEY      = (50, 150)   # uniform jitter added to every bot
BOT_RANDOM_INCOME     = 2.0         # uniform [0, x) jitter added to income

# ── Player starting stats ────────────────────────────────────────────────
STARTING_MONEY          = 500
STARTING_ENERGY         = 10
MAX_ENERGY              = 20
STARTING_PRODUCT_UNITS  = 5         # of every product
DEFAULT_MAX_INVENTORY   = 20

# ── Economy & income ─────────────────────────────────────────────────────
DOWNLINE_INCOME_PERCENT = 0.30      # of every descendant's income
UPLINE_SKIM_PERCENT     = 0.10      # of own income, paid upward
INCOME_PER_RECRUIT      = 0.5       # player income per recruit per day

# ── Power ────────────────────────────────────────────────────────────────
POWER_INCOME_MULTIPLIER     = 10    # income counts as this many days of money
POWER_INVESTMENT_MULTIPLIER = 1.5   # received capital counts 1.5x

# ── Coup ─────────────────────────────────────────────────────────────────
COUP_COST_MULTIPLIER     = 2.0      # cost = defender power × this …
COUP_POWER_REDUCTION     = 0.1      # … − attacker power × this
COUP_MIN_COST            = 200
COUP_SUCCESS_BASE        = 20       # percent
COUP_POWER_SCALE         = 200
COUP_MIN_CHANCE          = 5        # percent
COUP_MAX_CHANCE          = 100      # percent; 100 lets investment buy certainty
ATTACKER_COOLDOWN_SECS   = 10.0     # after ANY attempt
DEFENDER_COOLDOWN_SECS   = 30.0     # protection after surviving a coup
INVESTMENT_ROI           = 1.5      # investor payout multiplier on success

# 'redistribute'   — ledger survives, lost money split across attacker's downline
# 'keep_ledger'    — ledger survives, nothing else happens
# 'forfeit_ledger' — ledger cleared, investors lose their stake
FAILED_COUP_POLICY       = 'redistribute'

# ── Investment ───────────────────────────────────────────────────────────
INVESTMENT_CAP_FRACTION = 0.5       # one investor may hold ≤ 50 % of target power

TIERS = [
    'Hopeful Newcomer',
    'Bronze Associate',
    'Silver Partner',
    'Gold Executive',
    'Platinum Director',
    'Diamond Elite',
    'Double Diamond Supreme',
    'Triple Platinum Sapphire Overlord',
    'Galactic Ruby Omega Champion',
    'Transcendent Uranium Phoenix Master',
]

# pyramid level → minimum tier index required to invest there (player only)
INVESTMENT_TIER_REQUIREMENTS = {7: 0, 6: 1, 5: 2, 4: 3, 3: 4, 2: 5, 1: 6, 0: 7}

# ── Bot AI ───────────────────────────────────────────────────────────────
BOT_COUP_CHANCE_PER_TICK   = 0.10
BOT_COUP_MONEY_BUFFER      = 1.5
BOT_COUP_EXTRA_INVEST      = 0.2    # fraction of money added to a coup
BOT_INVEST_CHANCE_PER_TICK = 0.05
BOT_INVEST_PERCENT         = 0.1
BOT_MIN_INVEST_AMOUNT      = 10
BOT_MIN_INVEST_MONEY       = 100    # scaled by profile savings multiplier
THREATENED_COUP_ODDS       = 25     # percent; "looks ready to coup"
TOP_CANDIDATES             = 3

BOT_PROFILES = {
    'grinder': {
        'name': 'Grinder', 'coup_mult': 0.3, 'min_coup_odds': 50,
        'invest_mult': 0.3, 'invest_pct_mult': 0.5, 'savings_mult': 3.0,
        'target': 'none',
    },
    'shark': {
        'name': 'Shark', 'coup_mult': 2.5, 'min_coup_odds': 20,
        'invest_mult': 0.5, 'invest_pct_mult': 1.0, 'savings_mult': 1.0,
        'target': 'none',
    },
    'vc': {
        'name': 'Venture Capitalist', 'coup_mult': 0.2, 'min_coup_odds': 60,
        'invest_mult': 3.0, 'invest_pct_mult': 1.5, 'savings_mult': 1.5,
        'target': 'high_power',
    },
    'schemer': {
        'name': 'Schemer', 'coup_mult': 1.2, 'min_coup_odds': 35,
        'invest_mult': 2.0, 'invest_pct_mult': 1.2, 'savings_mult': 1.2,
        'target': 'siblings',
    },
    'opportunist': {
        'name': 'Opportunist', 'coup_mult': 1.0, 'min_coup_odds': 30,
        'invest_mult': 1.0, 'invest_pct_mult': 1.0, 'savings_mult': 1.5,
        'target': 'threatened',
    },
    'sleeper': {
        'name': 'Sleeper', 'coup_mult': 0.1, 'min_coup_odds': 70,
        'invest_mult': 0.1, 'invest_pct_mult': 0.3, 'savings_mult': 5.0,
        'target': 'none',
    },
    'kingmaker': {
        'name': 'Kingmaker', 'coup_mult': 0.1, 'min_coup_odds': 65,
        'invest_mult': 4.0, 'invest_pct_mult': 2.0, 'savings_mult': 1.0,
        'target': 'high_income',
    },
}

# Top = defensive old guard, bottom = hungry and aggressive
LEVEL_PROFILE_WEIGHTS = {
    'top':    {'grinder': 25, 'shark':  5, 'vc': 20, 'schemer': 15,
               'opportunist': 15, 'sleeper': 15, 'kingmaker': 5},
    'middle': {'grinder': 15, 'shark': 15, 'vc': 15, 'schemer': 25,
               'opportunist': 20, 'sleeper':  5, 'kingmaker': 5},
    'bottom': {'grinder': 10, 'shark': 30, 'vc':  5, 'schemer': 10,
               'opportunist': 30, 'sleeper': 10, 'kingmaker': 5},
}

# ── AI expansion ─────────────────────────────────────────────────────────
AI_NODE_RECRUIT_CHANCE   = 0.3
AI_NODE_EXPANSION_CHANCE = 0.4
AI_EXPANSION_MAX_NEW     = 2        # 1..N new prospects under a promoted node

# ── Time ─────────────────────────────────────────────────────────────────
HOURS_PER_DAY              = 24
DAYS_PER_WEEK              = 7
START_HOUR                 = 9
DAILY_ENERGY_BONUS         = 3
DAILY_BONUS_THROTTLE_SECS  = 10.0   # wall-clock gap required between bonuses
SECONDS_PER_HOUR           = 1.0    # real-time driver: 1 s = 1 simulated hour

# ── Player actions ───────────────────────────────────────────────────────
ENERGY_PRICE              = 800     # money for one energy purchase
ENERGY_PER_PURCHASE       = 5
MOVE_UP_ENERGY            = 3
MOVE_UP_RECRUIT_FACTOR    = 1.8
COLLECT_ENERGY            = 1
PRODUCT_BUY_ENERGY        = 5
RESTOCK_ENERGY            = 1
CHARISMA_COST_PER_LEVEL   = 200
RECRUITING_COST_PER_LEVEL = 250
INVENTORY_UPGRADE_STEP    = 10
INVENTORY_COST_PER_SLOT   = 15
REST_RECOVERY_RANGE       = (0.6, 1.0)
REST_ENERGY_SCALE         = 1.5

# ── Marketing events ─────────────────────────────────────────────────────
MARKETING_TIERS = {
    'social-media': {'name': 'Social Media Recruitment', 'hours': 24,
                     'energy': 2, 'base': 0.50, 'per_charisma': 0.05,
                     'attempts': 2},
    'home-party':   {'name': 'Home Recruitment Party', 'hours': 48,
                     'energy': 5, 'base': 0.35, 'per_charisma': 0.06,
                     'attempts': 4},
    'workshop':     {'name': 'Recruitment Seminar', 'hours': 168,
                     'energy': 8, 'base': 0.20, 'per_charisma': 0.07,
                     'attempts': 6},
}
MARKETING_REPUTATION_BONUS   = 0.02
MARKETING_RECRUITING_BONUS   = 0.06     # per recruiting-power point above 1
MARKETING_BASE_CHANCE_CAP    = 0.85
MARKETING_MIN_INVESTMENT     = 50
MARKETING_MAX_INVESTMENT     = 500
MARKETING_SUCCESS_MULTIPLIER = 0.0005   # chance per unit invested
MARKETING_SUCCESS_BOOST_CAP  = 0.15
MARKETING_ATTEMPTS_MULTIPLIER = 0.002   # attempts per unit invested
MARKETING_CHANCE_CAP         = 0.95
WORKSHOP_BONUS_CHANCE        = 0.10
WORKSHOP_BONUS_CHAINING      = False

# ── Products, trading & sales ────────────────────────────────────────────
PRODUCTS = {
    'essential-oils': {
        'name': 'Essential Oils', 'cost': 10, 'price': 25,
        'downsell': 15, 'chance': 0.25,
    },
    'wellness-supplements': {
        'name': 'Wellness Supplements', 'cost': 20, 'price': 45,
        'downsell': 30, 'chance': 0.20,
    },
    'lifestyle-kit': {
        'name': 'Lifestyle Enhancement Kit', 'cost': 50, 'price': 120,
        'downsell': 80, 'chance': 0.15,
    },
}
PRODUCT_RANKS = [('Bronze Seller', 5), ('Silver Seller', 15), ('Gold Seller', 40)]

TRADE_CHANCE            = 0.2    # per parent/child pair per day
TRADE_MAX_UNITS         = 3
SUPPLIER_RESTOCK_CHANCE = 0.3
SUPPLIER_RESTOCK_BELOW  = 0.25   # of capacity
SUPPLIER_RESTOCK_FILL   = 0.5    # restock up to this fraction of capacity
SALE_BASE_BONUS         = 0.08
SALE_LEVEL_FACTOR       = 0.03   # per level above the bottom
SALE_ATTEMPT_FACTOR     = 0.7
SALE_OWNED_BONUS        = 0.05   # player-owned and player nodes sell better
SALE_CHARISMA_BONUS     = 0.02   # player node only, per charisma point
SALE_CHANCE_CAP         = 0.9
COMMISSION_PERCENT      = 0.20   # node keeps 80 %, direct parent gets 20 %

# ── Event log ────────────────────────────────────────────────────────────
EVENT_LOG_MAX = 200
