import re

DESTINATION_SCHEMA = (
    '{"destination_url": "string - the clean destination URL, stripped of all tracking parameters '
    '(utm_*, fbclid, gclid, etc.) and redirect wrappers. Return only the final destination URL."}'
)

TRACKING_PARAM_PREFIXES = ("utm_",)

TRACKING_PARAMS = {
    "fbclid",
    "gclid",
    "dclid",
    "gbraid",
    "wbraid",
    "msclkid",
    "mc_cid",
    "mc_eid",
    "igshid",
    "yclid",
    "_hsenc",
    "_hsmi",
    "ref_src",
    "spm",
}

REDIRECT_PARAMS = (
    "url",
    "u",
    "q",
    "target",
    "dest",
    "destination",
    "redirect",
    "redirect_url",
)

MAX_REDIRECT_DEPTH = 5

COPY_ACK_DELAY_SECONDS = 2.0

RECORD_ID_PATTERN = re.compile(r"([a-f0-9]{24})$", re.IGNORECASE)
