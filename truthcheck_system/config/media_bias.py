"""Default domain -> political lean table for web evidence categorization.

Keys are normalized hosts (lowercase, no www./m. prefix). Lookup is exact
host first, then the parent domain (last two labels); there is no substring
matching, so "notcnn.com" never matches "cnn.com".

The table is a starting point only. DomainBiasResolver.reload() replaces it
wholesale from a JSON snapshot.
"""

from typing import Dict

LEFT = "left"
CENTER = "center"
RIGHT = "right"
UNKNOWN = "unknown"

VALID_LEANS = frozenset({LEFT, CENTER, RIGHT})

DEFAULT_BIAS_MAP: Dict[str, str] = {
    # Left-leaning
    "cnn.com": LEFT,
    "nytimes.com": LEFT,
    "washingtonpost.com": LEFT,
    "huffpost.com": LEFT,
    "huffingtonpost.com": LEFT,
    "motherjones.com": LEFT,
    "buzzfeednews.com": LEFT,
    "theguardian.com": LEFT,
    "msnbc.com": LEFT,
    "vox.com": LEFT,
    "slate.com": LEFT,
    "thedailybeast.com": LEFT,
    "thinkprogress.org": LEFT,
    "npr.org": LEFT,
    "pbs.org": LEFT,
    "politico.com": LEFT,
    "theatlantic.com": LEFT,

    # Center
    "reuters.com": CENTER,
    "apnews.com": CENTER,
    "bbc.com": CENTER,
    "bbc.co.uk": CENTER,
    "c-span.org": CENTER,
    "csmonitor.com": CENTER,
    "usatoday.com": CENTER,
    "axios.com": CENTER,
    "thehill.com": CENTER,
    "bloomberg.com": CENTER,
    "marketwatch.com": CENTER,
    "economist.com": CENTER,
    "forbes.com": CENTER,
    "time.com": CENTER,
    "newsweek.com": CENTER,
    "abcnews.go.com": CENTER,
    "cbsnews.com": CENTER,
    "nbcnews.com": CENTER,

    # Right-leaning
    "foxnews.com": RIGHT,
    "foxbusiness.com": RIGHT,
    "wsj.com": RIGHT,
    "nationalreview.com": RIGHT,
    "dailywire.com": RIGHT,
    "breitbart.com": RIGHT,
    "nypost.com": RIGHT,
    "washingtontimes.com": RIGHT,
    "theblaze.com": RIGHT,
    "oann.com": RIGHT,
    "newsmax.com": RIGHT,
    "dailycaller.com": RIGHT,
    "townhall.com": RIGHT,
    "spectator.org": RIGHT,
    "washingtonexaminer.com": RIGHT,
}
