"""Country and region codes accepted by the scrape.do proxy network."""

from __future__ import annotations

from typing import Dict, Literal

__all__ = ["GEO_CODES", "REGIONAL_GEO_CODES", "RegionalGeoCode", "is_geo_code"]

RegionalGeoCode = Literal[
    "europe", "asia", "africa", "oceania", "northamerica", "southamerica"
]

REGIONAL_GEO_CODES: frozenset[str] = frozenset(
    {"europe", "asia", "africa", "oceania", "northamerica", "southamerica"}
)

GEO_CODES: Dict[str, str] = {
    "af": "Afghanistan",
    "al": "Albania",
    "ad": "Andorra",
    "ao": "Angola",
    "ar": "Argentina",
    "am": "Armenia",
    "aw": "Aruba",
    "au": "Australia",
    "at": "Austria",
    "az": "Azerbaijan",
    "bs": "Bahamas",
    "bd": "Bangladesh",
    "by": "Belarus",
    "be": "Belgium",
    "bz": "Belize",
    "bj": "Benin",
    "bt": "Bhutan",
    "bo": "Bolivia",
    "ba": "Bosnia Herzegovina",
    "br": "Brazil",
    "vg": "British Virgin Islands",
    "bg": "Bulgaria",
    "kh": "Cambodia",
    "cm": "Cameroon",
    "ca": "Canada",
    "cf": "Central African Republic",
    "td": "Chad",
    "cl": "Chile",
    "cn": "China",
    "co": "Colombia",
    "cr": "Costa Rica",
    "ci": "Cote D'Ivoire",
    "hr": "Croatia",
    "cu": "Cuba",
    "cy": "Cyprus",
    "cz": "Czech Republic",
    "dk": "Denmark",
    "dj": "Djibouti",
    "dm": "Dominica",
    "ec": "Ecuador",
    "eg": "Egypt",
    "ee": "Estonia",
    "et": "Ethiopia",
    "fj": "Fiji",
    "fi": "Finland",
    "fr": "France",
    "gm": "Gambia",
    "gb": "Great Britain",
    "ge": "Georgia",
    "de": "Germany",
    "gh": "Ghana",
    "gr": "Greece",
    "ht": "Haiti",
    "hn": "Honduras",
    "hk": "Hong Kong",
    "hu": "Hungary",
    "is": "Iceland",
    "il": "Israel",
    "in": "India",
    "id": "Indonesia",
    "ir": "Iran",
    "iq": "Iraq",
    "ie": "Ireland",
    "it": "Italy",
    "jm": "Jamaica",
    "jp": "Japan",
    "jo": "Jordan",
    "kz": "Kazakhstan",
    "ke": "Kenya",
    "lb": "Lebanon",
    "lr": "Liberia",
    "li": "Liechtenstein",
    "lt": "Lithuania",
    "lv": "Latvia",
    "lu": "Luxembourg",
    "mk": "Macedonia",
    "mg": "Madagascar",
    "my": "Malaysia",
    "mv": "Maldives",
    "ml": "Mali",
    "mt": "Malta",
    "mr": "Mauritania",
    "mu": "Mauritius",
    "mx": "Mexico",
    "md": "Moldova",
    "mc": "Monaco",
    "mn": "Mongolia",
    "me": "Montenegro",
    "ma": "Morocco",
    "mz": "Mozambique",
    "mm": "Myanmar",
    "nl": "Netherlands",
    "nz": "New Zealand",
    "ng": "Nigeria",
    "no": "Norway",
    "om": "Oman",
    "pk": "Pakistan",
    "pa": "Panama",
    "py": "Paraguay",
    "pe": "Peru",
    "ph": "Philippines",
    "pt": "Portugal",
    "pl": "Poland",
    "pr": "Puerto Rico",
    "qa": "Qatar",
    "ro": "Romania",
    "sa": "Saudi Arabia",
    "sn": "Senegal",
    "rs": "Serbia",
    "sc": "Seychelles",
    "sg": "Singapore",
    "sk": "Slovakia",
    "si": "Slovenia",
    "za": "South Africa",
    "kr": "South Korea",
    "ss": "South Sudan",
    "es": "Spain",
    "sd": "Sudan",
    "se": "Sweden",
    "ch": "Switzerland",
    "tw": "Taiwan",
    "th": "Thailand",
    "tn": "Tunisia",
    "tg": "Togo",
    "tr": "Turkey",
    "tm": "Turkmenistan",
    "ae": "United Arab Emirates",
    "ug": "Uganda",
    "ua": "Ukraine",
    "uy": "Uruguay",
    "us": "United States",
    "uz": "Uzbekistan",
    "ve": "Venezuela",
    "vn": "Vietnam",
    "ye": "Yemen",
    "zm": "Zambia",
}


def is_geo_code(code: str) -> bool:
    """Return True if ``code`` is a supported country code (lowercase ISO 3166-1 alpha-2)."""
    return code in GEO_CODES
