"""Polish spelled-out amounts for the "Słownie" line of an invoice."""

from typing import Any

from faktura.core.money import to_cents

_UNITS = [
    "", "jeden", "dwa", "trzy", "cztery", "pięć", "sześć", "siedem", "osiem", "dziewięć",
]
_TEENS = [
    "dziesięć", "jedenaście", "dwanaście", "trzynaście", "czternaście",
    "piętnaście", "szesnaście", "siedemnaście", "osiemnaście", "dziewiętnaście",
]
_TENS = [
    "", "", "dwadzieścia", "trzydzieści", "czterdzieści", "pięćdziesiąt",
    "sześćdziesiąt", "siedemdziesiąt", "osiemdziesiąt", "dziewięćdziesiąt",
]
_HUNDREDS = [
    "", "sto", "dwieście", "trzysta", "czterysta", "pięćset",
    "sześćset", "siedemset", "osiemset", "dziewięćset",
]

# (singular, 2-4 form, 5+ form), largest scale first
_SCALES = [
    (10**9, ("miliard", "miliardy", "miliardów")),
    (10**6, ("milion", "miliony", "milionów")),
    (10**3, ("tysiąc", "tysiące", "tysięcy")),
]
_ZLOTY = ("złoty", "złote", "złotych")
_GROSZ = ("grosz", "grosze", "groszy")


def plural_form(number: int, forms: tuple[str, str, str]) -> str:
    """Pick the Polish noun form agreeing with `number`.

    >>> plural_form(22, ("złoty", "złote", "złotych"))
    'złote'
    """
    if number == 1:
        return forms[0]
    if 2 <= number % 10 <= 4 and not 12 <= number % 100 <= 14:
        return forms[1]
    return forms[2]


def _hundreds_to_words(number: int) -> list[str]:
    words = []
    hundreds, remainder = divmod(number, 100)
    if hundreds:
        words.append(_HUNDREDS[hundreds])
    if 10 <= remainder < 20:
        words.append(_TEENS[remainder - 10])
    else:
        tens, units = divmod(remainder, 10)
        if tens:
            words.append(_TENS[tens])
        if units:
            words.append(_UNITS[units])
    return words


def integer_to_words(number: int) -> str:
    """Spell a non-negative integer in Polish ("zero" for 0)."""
    if number == 0:
        return "zero"

    words: list[str] = []
    remainder = number
    for scale, forms in _SCALES:
        group, remainder = divmod(remainder, scale)
        if not group:
            continue
        # "tysiąc", not "jeden tysiąc"
        if group != 1:
            words.extend(_hundreds_to_words(group))
        words.append(plural_form(group, forms))
    words.extend(_hundreds_to_words(remainder))
    return " ".join(words)


def amount_in_words(value: Any) -> str:
    """Spell a PLN amount, e.g. 123.45 -> "sto dwadzieścia trzy złote
    czterdzieści pięć groszy". Grosze are omitted when there are none.
    """
    cents = to_cents(value)
    prefix = "minus " if cents < 0 else ""
    zloty, grosze = divmod(abs(cents), 100)

    text = f"{integer_to_words(zloty)} {plural_form(zloty, _ZLOTY)}"
    if grosze:
        text += f" {integer_to_words(grosze)} {plural_form(grosze, _GROSZ)}"
    return prefix + text
