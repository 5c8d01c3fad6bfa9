# crm/domains/adr/countries.py

"""
ISO 3166-1 alpha-2 country codes offered by the address forms.
The list comes from the ISO data shipped with `pycountry`.
"""

from typing import Dict

import pycountry


def country_names() -> Dict[str, str]:
    """Every ISO 3166-1 country as {alpha_2 code: short name}."""
    return {country.alpha_2: country.name for country in pycountry.countries}
