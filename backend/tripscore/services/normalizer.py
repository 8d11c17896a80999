"""
Canonical continent and country names.

Raw names arrive from reverse geocoding and user input in many spellings.
Everything that aggregates by continent or country goes through this module so
that one real place never lands in two score buckets.
"""
from typing import Dict, List, Optional, Tuple

ASIA = "ASIA"
AFRICA = "AFRICA"
NORTH_AMERICA = "NORTH AMERICA"
SOUTH_AMERICA = "SOUTH AMERICA"
AUSTRALIA = "AUSTRALIA"
EUROPE = "EUROPE"
ANTARCTICA = "ANTARCTICA"
UNKNOWN_CONTINENT = "UNKNOWN"

# Response order for the continents breakdown
CONTINENTS: Tuple[str, ...] = (
    ASIA,
    AFRICA,
    NORTH_AMERICA,
    SOUTH_AMERICA,
    AUSTRALIA,
    EUROPE,
    ANTARCTICA,
)

UNKNOWN_COUNTRY = "Unknown"

CONTINENT_SYNONYMS: Dict[str, str] = {
    **{name: name for name in CONTINENTS},
    "OCEANIA": AUSTRALIA,
    "AUSTRALASIA": AUSTRALIA,
    "AUSTRALIA/OCEANIA": AUSTRALIA,
    # Simplification: bare "America" is taken to mean North America.
    "AMERICA": NORTH_AMERICA,
    "CENTRAL AMERICA": NORTH_AMERICA,
    "CARIBBEAN": NORTH_AMERICA,
    "LATIN AMERICA": SOUTH_AMERICA,
    "ANTARCTIC": ANTARCTICA,
}

UK_REGIONS = (
    "ENGLAND", "SCOTLAND", "WALES", "NORTHERN IRELAND", "GREAT BRITAIN", "BRITAIN", "UK",
)

# "Georgia" is left out on purpose: it is far more often the country.
US_STATES = (
    "ALABAMA", "ALASKA", "ARIZONA", "ARKANSAS", "CALIFORNIA", "COLORADO", "CONNECTICUT",
    "DELAWARE", "FLORIDA", "HAWAII", "IDAHO", "ILLINOIS", "INDIANA", "IOWA",
    "KANSAS", "KENTUCKY", "LOUISIANA", "MAINE", "MARYLAND", "MASSACHUSETTS", "MICHIGAN",
    "MINNESOTA", "MISSISSIPPI", "MISSOURI", "MONTANA", "NEBRASKA", "NEVADA", "NEW HAMPSHIRE",
    "NEW JERSEY", "NEW MEXICO", "NEW YORK", "NORTH CAROLINA", "NORTH DAKOTA", "OHIO",
    "OKLAHOMA", "OREGON", "PENNSYLVANIA", "RHODE ISLAND", "SOUTH CAROLINA", "SOUTH DAKOTA",
    "TENNESSEE", "TEXAS", "UTAH", "VERMONT", "VIRGINIA", "WASHINGTON", "WEST VIRGINIA",
    "WISCONSIN", "WYOMING",
    "DISTRICT OF COLUMBIA", "WASHINGTON DC", "WASHINGTON D.C.", "DC",
    "PUERTO RICO", "GUAM", "AMERICAN SAMOA", "US VIRGIN ISLANDS", "U.S. VIRGIN ISLANDS",
    "NORTHERN MARIANA ISLANDS",
    "USA", "US", "U.S.", "U.S.A.", "UNITED STATES OF AMERICA", "AMERICA",
)

CANADA_PROVINCES = (
    "ONTARIO", "QUEBEC", "NOVA SCOTIA", "NEW BRUNSWICK", "MANITOBA", "BRITISH COLUMBIA",
    "PRINCE EDWARD ISLAND", "SASKATCHEWAN", "ALBERTA", "NEWFOUNDLAND AND LABRADOR",
    "NORTHWEST TERRITORIES", "YUKON", "NUNAVUT",
)

AUSTRALIA_STATES = (
    "NEW SOUTH WALES", "VICTORIA", "QUEENSLAND", "WESTERN AUSTRALIA", "SOUTH AUSTRALIA",
    "TASMANIA", "NORTHERN TERRITORY", "AUSTRALIAN CAPITAL TERRITORY", "ACT",
)

CHINA_REGIONS = ("HONG KONG", "MACAU", "MACAO", "TAIWAN", "PEOPLE'S REPUBLIC OF CHINA", "PRC")

REGION_TO_COUNTRY: Dict[str, str] = {
    **{name: "United Kingdom" for name in UK_REGIONS},
    **{name: "United States" for name in US_STATES},
    **{name: "Canada" for name in CANADA_PROVINCES},
    **{name: "Australia" for name in AUSTRALIA_STATES},
    **{name: "China" for name in CHINA_REGIONS},
    "BHARAT": "India",
}

# Every country expected on each continent, so that per-continent breakdowns
# can list countries the user has not visited yet. Regions folded into a
# parent country above are not listed on their own.
COUNTRIES_BY_CONTINENT: Dict[str, List[str]] = {
    AUSTRALIA: [
        "Australia", "New Zealand", "Fiji", "Papua New Guinea", "Solomon Islands",
        "Vanuatu", "Federated States of Micronesia", "Kiribati", "Marshall Islands",
        "Nauru", "Palau", "Samoa", "Tonga", "Tuvalu", "Cook Islands", "French Polynesia",
        "New Caledonia", "Niue", "Pitcairn Islands", "Tokelau", "Wallis and Futuna",
        "Wake Island",
    ],
    ASIA: [
        "India", "China", "Japan", "Thailand", "Singapore", "Malaysia", "Indonesia",
        "South Korea", "Vietnam", "Philippines", "Bangladesh", "Pakistan", "Sri Lanka",
        "Myanmar", "Cambodia", "Laos", "Nepal", "Bhutan", "Maldives", "Afghanistan",
        "Iran", "Iraq", "Israel", "Jordan", "Kuwait", "Lebanon", "Oman", "Qatar",
        "Saudi Arabia", "Syria", "Turkey", "United Arab Emirates", "Yemen", "Kazakhstan",
        "Kyrgyzstan", "Tajikistan", "Turkmenistan", "Uzbekistan", "Mongolia", "North Korea",
        "Brunei", "East Timor", "Armenia", "Azerbaijan", "Bahrain", "Georgia", "Palestine",
    ],
    EUROPE: [
        "France", "Germany", "Italy", "Spain", "United Kingdom", "Netherlands",
        "Sweden", "Norway", "Denmark", "Finland", "Poland", "Russia", "Austria",
        "Belgium", "Bulgaria", "Croatia", "Cyprus", "Czech Republic", "Estonia",
        "Greece", "Hungary", "Ireland", "Latvia", "Lithuania", "Luxembourg",
        "Malta", "Portugal", "Romania", "Slovakia", "Slovenia", "Switzerland",
        "Ukraine", "Belarus", "Moldova", "Albania", "Bosnia and Herzegovina",
        "Montenegro", "North Macedonia", "Serbia", "Iceland", "Liechtenstein",
        "Monaco", "San Marino", "Vatican City", "Andorra", "Faroe Islands",
        "Gibraltar", "Guernsey", "Isle of Man", "Jersey", "Svalbard and Jan Mayen",
    ],
    NORTH_AMERICA: [
        "United States", "Canada", "Mexico", "Guatemala", "Cuba", "Jamaica",
        "Haiti", "Dominican Republic", "Trinidad and Tobago",
        "Barbados", "Saint Lucia", "Grenada", "Saint Vincent and the Grenadines",
        "Antigua and Barbuda", "Saint Kitts and Nevis", "Dominica", "Belize",
        "El Salvador", "Honduras", "Nicaragua", "Costa Rica", "Panama",
        "Bahamas", "Greenland", "Bermuda", "Cayman Islands", "Turks and Caicos Islands",
        "Aruba", "Bonaire", "Curaçao", "Sint Maarten", "Anguilla", "British Virgin Islands",
        "Montserrat", "Saint Martin", "Saint Barthélemy",
        "Guadeloupe", "Martinique", "Sint Eustatius", "Saba",
    ],
    SOUTH_AMERICA: [
        "Brazil", "Argentina", "Chile", "Peru", "Colombia", "Venezuela", "Ecuador",
        "Bolivia", "Paraguay", "Uruguay", "Guyana", "Suriname", "French Guiana",
        "Falkland Islands", "South Georgia and the South Sandwich Islands",
    ],
    AFRICA: [
        "Egypt", "South Africa", "Nigeria", "Kenya", "Morocco", "Ethiopia", "Ghana",
        "Algeria", "Angola", "Benin", "Botswana", "Burkina Faso", "Burundi",
        "Cameroon", "Cape Verde", "Central African Republic", "Chad", "Comoros",
        "Democratic Republic of the Congo", "Republic of the Congo", "Djibouti",
        "Equatorial Guinea", "Eritrea", "Eswatini", "Gabon", "Gambia", "Guinea",
        "Guinea-Bissau", "Ivory Coast", "Lesotho", "Liberia", "Libya", "Madagascar",
        "Malawi", "Mali", "Mauritania", "Mauritius", "Mozambique", "Namibia",
        "Niger", "Rwanda", "São Tomé and Príncipe", "Senegal", "Seychelles",
        "Sierra Leone", "Somalia", "Sudan", "South Sudan", "Tanzania", "Togo",
        "Tunisia", "Uganda", "Zambia", "Zimbabwe", "Western Sahara", "Mayotte",
        "Réunion", "Saint Helena", "Ascension Island", "Tristan da Cunha",
    ],
    ANTARCTICA: [
        "Antarctica", "Bouvet Island", "French Southern Territories",
        "Heard Island and McDonald Islands",
    ],
}

# Upper-cased reference name -> (canonical spelling, continent)
_REFERENCE_INDEX: Dict[str, Tuple[str, str]] = {
    country.upper(): (country, continent)
    for continent, countries in COUNTRIES_BY_CONTINENT.items()
    for country in countries
}


def _lookup_key(raw: str) -> str:
    return " ".join(raw.strip().upper().split())


def normalize_continent(raw: Optional[str]) -> str:
    """Fold a raw continent name into one of the seven canonical continents or UNKNOWN."""
    if not raw or not isinstance(raw, str):
        return UNKNOWN_CONTINENT
    key = _lookup_key(raw.replace("_", " ").replace("-", " "))
    return CONTINENT_SYNONYMS.get(key, UNKNOWN_CONTINENT)


def _resolve_country(key: str) -> Optional[str]:
    if key in REGION_TO_COUNTRY:
        return REGION_TO_COUNTRY[key]
    if key in _REFERENCE_INDEX:
        return _REFERENCE_INDEX[key][0]
    return None


def normalize_country(raw: Optional[str]) -> str:
    """
    Map a raw country name to its canonical country.

    Sub-national regions resolve to their parent country (England -> United
    Kingdom, California -> United States). Names in the reference table come
    back in the table's spelling. Anything else passes through trimmed, and
    empty input becomes ``Unknown``.
    """
    if not raw or not isinstance(raw, str) or not raw.strip():
        return UNKNOWN_COUNTRY

    key = _lookup_key(raw)
    resolved = _resolve_country(key)
    if resolved:
        return resolved

    # "Victoria, British Columbia, Canada": the country is the last part
    if "," in key:
        for part in reversed(key.split(",")):
            resolved = _resolve_country(part.strip())
            if resolved:
                return resolved

    return raw.strip()


def continent_for_country(country: Optional[str]) -> str:
    """Continent of a country according to the reference table, or UNKNOWN."""
    if not country:
        return UNKNOWN_CONTINENT
    entry = _REFERENCE_INDEX.get(_lookup_key(normalize_country(country)))
    return entry[1] if entry else UNKNOWN_CONTINENT


def get_countries_for_continent(continent: str) -> List[str]:
    """Reference country list for a canonical continent (empty if unknown)."""
    return list(COUNTRIES_BY_CONTINENT.get(normalize_continent(continent), []))
