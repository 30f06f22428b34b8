import re
from typing import Optional


class AmountParser:
    """
    Parser for register values typed on the command line.

    Supports:
    - Suffixes: k (thousand), m/mil (million), b (billion)
    - Thousand separators: 1,250 or 1,250.50
    - Decimal comma: 12,5 = 12.5
    - Standard numbers: 1000, 500.50
    - Mixed formats: 1.5k = 1500, 2.5m = 2500000
    """

    MULTIPLIERS = {
        "k": 1_000,
        "m": 1_000_000,
        "mil": 1_000_000,
        "b": 1_000_000_000,
    }

    AMOUNT_PATTERN = re.compile(
        r"""
        ^\s*
        (?P<currency>\$)?
        (?P<number>
            \d{1,3}(?:,\d{3})+(?:\.\d+)?    # 1,250 or 1,250.50
            |
            \d+(?:[.,]\d+)?                 # 1250, 12.5 or 12,5
        )
        \s*
        (?P<suffix>k|mil|m|b)?
        \s*$
        """,
        re.VERBOSE | re.IGNORECASE,
    )

    @classmethod
    def parse(cls, text: str) -> Optional[float]:
        """
        Parse an amount string and return the numeric value.

        Args:
            text: The whole value as typed (e.g., "16k", "1,250.50", "$12")

        Returns:
            Float value of the amount, or None if the text is not an amount
        """
        if not text:
            return None

        match = cls.AMOUNT_PATTERN.match(text)
        if not match:
            return None

        number = cls._parse_number(match.group("number"))
        if number is None:
            return None

        suffix = match.group("suffix")
        if suffix:
            number *= cls.MULTIPLIERS[suffix.lower()]

        return float(number)

    @classmethod
    def _parse_number(cls, number_str: str) -> Optional[float]:
        """Normalize separators: commas before a dot or in groups of three are thousands."""
        if "," in number_str:
            head, _, tail = number_str.rpartition(",")
            if "." in number_str or len(tail.split(".")[0]) == 3:
                normalized = number_str.replace(",", "")
            else:
                normalized = f"{head.replace(',', '')}.{tail}"
        else:
            normalized = number_str

        try:
            return float(normalized)
        except ValueError:
            return None
