"""Stopword lists used when extracting keyword candidates."""

from __future__ import annotations

from typing import Dict, FrozenSet

_ENGLISH = """
a about above across after afterwards again against all almost alone along already also although
always am among amongst an and another any anybody anyhow anyone anything anyway anywhere are
aren't around as at back be became because become becomes becoming been before beforehand behind
being below beside besides between beyond both but by can can't cannot could couldn't did didn't do
does doesn't doing don't done down during each either else elsewhere enough etc even ever every
everybody everyone everything everywhere except few for former formerly from further get gets
getting go goes going gone got had hadn't has hasn't have haven't having he he'd he'll he's her
here here's hereafter hereby herein hers herself him himself his how how's however i i'd i'll i'm
i've ie if in indeed instead into is isn't it it's its itself just keep last latter latterly least
less let let's like made make makes many may maybe me meanwhile might mine more moreover most mostly
much must mustn't my myself namely neither never nevertheless next no nobody none noone nor not
nothing now nowhere of off often on once one only onto or other others otherwise ought our ours
ourselves out over own per perhaps please put quite rather re really said same see seem seemed
seeming seems several shall shan't she she'd she'll she's should shouldn't since so some somebody
somehow someone something sometime sometimes somewhere still such than that that's the their theirs
them themselves then thence there there's thereafter thereby therefore therein thereupon these they
they'd they'll they're they've this those though through throughout thru thus to together too
toward towards under until up upon us very via was wasn't we we'd we'll we're we've well were
weren't what what's whatever when when's whence whenever where where's whereafter whereas whereby
wherein whereupon wherever whether which while whither who who's whoever whole whom whose why why's
will with within without won't would wouldn't yet you you'd you'll you're you've your yours
yourself yourselves
"""

ENGLISH_STOPWORDS: FrozenSet[str] = frozenset(_ENGLISH.split())

STOPWORDS: Dict[str, FrozenSet[str]] = {
    "english": ENGLISH_STOPWORDS,
}


def get_stopwords(language: str) -> FrozenSet[str]:
    """Return the stopword set for ``language``."""
    try:
        return STOPWORDS[language.lower()]
    except KeyError:
        raise ValueError(f"No stopword list for language '{language}'. Available: {sorted(STOPWORDS)}") from None
