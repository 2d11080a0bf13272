import os
from pathlib import Path

# Base paths
BASE_DIR = Path(__file__).resolve().parent

# Cache directory
CACHE_DIR = os.environ.get(
    "BRAND_BOT_CACHE_DIR",
    os.path.join(os.path.expanduser("~"), ".cache", "brand_bot")
)

# Cached results older than this are treated as misses (seconds)
CACHE_MAX_AGE = 7 * 24 * 60 * 60

# HTTP Headers to use for requests
HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36',
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
    'Cache-Control': 'no-cache',
    'Pragma': 'no-cache'
}

# Timeouts in seconds
FETCH_TIMEOUT = 10
PROBE_TIMEOUT = 4

# Returned when nothing better is known
DEFAULT_BRAND_COLOR = "#008F5D"
PLACEHOLDER_LOGO = "/placeholder.svg"
DEFAULT_INDUSTRY = "Technology"

# Colors that mark a stored record as still carrying a placeholder value.
# '#00D5AC' was written by older releases as their default.
PLACEHOLDER_COLORS = (DEFAULT_BRAND_COLOR, "#00D5AC")

MAX_ALTERNATIVES = 5

# Third-party lookups, checked in order
LOGO_SERVICE_TEMPLATES = (
    "https://logo.clearbit.com/{domain}",
    "https://www.google.com/s2/favicons?domain={domain}&sz=128",
    "https://icons.duckduckgo.com/ip3/{domain}.ico",
)

# Terminal fallback, never probed
FAVICON_SERVICE_TEMPLATE = "https://www.google.com/s2/favicons?domain={domain}&sz=128"

# Conventional icon locations relative to the site root
COMMON_ICON_PATHS = (
    "/logo.svg",
    "/logo.png",
    "/images/logo.png",
    "/img/logo.png",
    "/assets/logo.png",
    "/apple-touch-icon.png",
    "/favicon.png",
    "/favicon.ico",
)

_HEX = r'(#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b|rgba?\([^)]*\))'

# Checked in order against the raw page text
BRAND_COLOR_PATTERNS = (
    r'--primary-color\s*:\s*' + _HEX,
    r'--brand-color\s*:\s*' + _HEX,
    r'--color-primary\s*:\s*' + _HEX,
    r'--theme-color\s*:\s*' + _HEX,
    r'--main-color\s*:\s*' + _HEX,
    r'--primary\s*:\s*' + _HEX,
    r'\.brand[\w-]*\s*\{[^}]*?(?:background-)?color\s*:\s*' + _HEX,
    r'\.navbar[\w-]*\s*\{[^}]*?background(?:-color)?\s*:\s*' + _HEX,
    r'\.(?:btn|button)-primary\s*\{[^}]*?background(?:-color)?\s*:\s*' + _HEX,
    r'header\s*\{[^}]*?background(?:-color)?\s*:\s*' + _HEX,
)

# Ordered: the first industry with a matching keyword wins
INDUSTRY_KEYWORDS = (
    ("Finance", ("finance", "banking", "investment", "insurance", "capital", "wealth", "payment", "credit", "loan")),
    ("Healthcare", ("health", "healthcare", "medical", "wellness", "fitness", "doctor", "hospital", "clinic", "patient", "pharmacy")),
    ("Retail", ("retail", "shop", "store", "purchase", "ecommerce", "e-commerce", "shopping")),
    ("Travel", ("travel", "hotel", "booking", "flight", "vacation", "tourism", "trip", "holiday", "destination")),
    ("Food & Dining", ("food", "restaurant", "dining", "cuisine", "meal", "recipe", "chef")),
    ("Education", ("education", "learning", "course", "university", "school", "college", "academy", "student")),
    ("Media & Entertainment", ("media", "news", "entertainment", "film", "movie", "music", "game", "streaming", "podcast")),
    ("Real Estate", ("real estate", "property", "apartment", "housing", "rent", "mortgage")),
    ("Marketing & Creative", ("marketing", "advertising", "agency", "campaign", "creative", "studio")),
    ("Legal Services", ("legal", "law", "attorney", "lawyer", "litigation", "court")),
    ("Business Services", ("consulting", "business service", "professional service", "strategy")),
    ("Technology", ("technology", "software", "app", "digital", "tech", "data", "cloud", "computer", "internet")),
    ("Manufacturing", ("manufacturing", "industrial", "factory", "production", "engineering", "machine")),
    ("Nonprofit", ("nonprofit", "charity", "foundation", "donate", "volunteer")),
    ("Government", ("government", "official", "administration", "policy")),
)

# Vetted values for well-known domains
KNOWN_BRANDS = {
    'google.com': {
        'logo_url': 'https://www.google.com/images/branding/googlelogo/1x/googlelogo_color_272x92dp.png',
        'brand_color': '#4285F4',
        'industry': 'Technology',
    },
    'apple.com': {
        'logo_url': 'https://www.apple.com/ac/globalnav/7/en_US/images/be15095f-5a20-57d0-ad14-cf4c638e223a/globalnav_apple_image__b5er5ngrzxqq_large.svg',
        'brand_color': '#000000',
        'industry': 'Consumer Electronics',
    },
    'amazon.com': {
        'logo_url': 'https://upload.wikimedia.org/wikipedia/commons/thumb/a/a9/Amazon_logo.svg/1024px-Amazon_logo.svg.png',
        'brand_color': '#FF9900',
        'industry': 'E-commerce',
    },
    'microsoft.com': {
        'logo_url': 'https://img-prod-cms-rt-microsoft-com.akamaized.net/cms/api/am/imageFileData/RE1Mu3b?ver=5c31',
        'brand_color': '#00A4EF',
        'industry': 'Technology',
    },
    'netflix.com': {
        'logo_url': 'https://assets.nflxext.com/ffe/siteui/common/icons/nfLogo/netflix-logo-set-bw.png',
        'brand_color': '#E50914',
        'industry': 'Entertainment',
    },
}
