"""tools/rules

Rule derivation (generator.py) and the rules.xml file format (rules_xml.py).
"""

from .generator import generate_rules  # noqa: F401
from .rules_xml import load_rules_xml, save_rules_xml  # noqa: F401
