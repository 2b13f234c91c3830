# UnitEngine.py
"""""
Static unit tables and conversion.

Every unit is stored as (factor, offset) relative to the base unit of its category:
    base = (value - offset) * factor
    value = base / factor + offset
Only the temperature units use an offset.
"""""
import math


def _unit(name, symbol, factor, offset=0.0):
    return {"name": name, "symbol": symbol, "factor": factor, "offset": offset}


UNIT_CATEGORIES = {
    "length": {"name": "Length", "icon": "📏"},
    "weight": {"name": "Weight", "icon": "⚖️"},
    "volume": {"name": "Volume", "icon": "🧪"},
    "temperature": {"name": "Temp", "icon": "🌡️"},
    "area": {"name": "Area", "icon": "📐"},
    "speed": {"name": "Speed", "icon": "🚀"},
    "time": {"name": "Time", "icon": "⏱️"},
}

UNITS = {
    "length": {
        "m": _unit("Meter", "m", 1.0),
        "km": _unit("Kilometer", "km", 1000.0),
        "cm": _unit("Centimeter", "cm", 0.01),
        "mm": _unit("Millimeter", "mm", 0.001),
        "mi": _unit("Mile", "mi", 1609.344),
        "yd": _unit("Yard", "yd", 0.9144),
        "ft": _unit("Foot", "ft", 0.3048),
        "in": _unit("Inch", "in", 0.0254),
    },
    "weight": {
        "kg": _unit("Kilogram", "kg", 1.0),
        "g": _unit("Gram", "g", 0.001),
        "mg": _unit("Milligram", "mg", 0.000001),
        "lb": _unit("Pound", "lb", 0.453592),
        "oz": _unit("Ounce", "oz", 0.0283495),
        "t": _unit("Metric Ton", "t", 1000.0),
    },
    "volume": {
        "L": _unit("Liter", "L", 1.0),
        "mL": _unit("Milliliter", "mL", 0.001),
        "gal": _unit("Gallon (US)", "gal", 3.78541),
        "qt": _unit("Quart (US)", "qt", 0.946353),
        "pt": _unit("Pint (US)", "pt", 0.473176),
        "cup": _unit("Cup (US)", "cup", 0.236588),
        "floz": _unit("Fluid Ounce", "fl oz", 0.0295735),
    },
    "temperature": {
        "C": _unit("Celsius", "°C", 1.0),
        "F": _unit("Fahrenheit", "°F", 5 / 9, 32.0),
        "K": _unit("Kelvin", "K", 1.0, 273.15),
    },
    "area": {
        "m2": _unit("Square Meter", "m²", 1.0),
        "km2": _unit("Square Km", "km²", 1000000.0),
        "ha": _unit("Hectare", "ha", 10000.0),
        "acre": _unit("Acre", "acre", 4046.86),
        "ft2": _unit("Square Foot", "ft²", 0.092903),
        "in2": _unit("Square Inch", "in²", 0.00064516),
    },
    "speed": {
        "mps": _unit("Meters/sec", "m/s", 1.0),
        "kmph": _unit("Km/hour", "km/h", 1 / 3.6),
        "mph": _unit("Miles/hour", "mph", 0.44704),
        "knot": _unit("Knot", "kn", 0.514444),
        "fps": _unit("Feet/sec", "ft/s", 0.3048),
    },
    "time": {
        "s": _unit("Second", "s", 1.0),
        "ms": _unit("Millisecond", "ms", 0.001),
        "min": _unit("Minute", "min", 60.0),
        "hr": _unit("Hour", "hr", 3600.0),
        "day": _unit("Day", "day", 86400.0),
        "wk": _unit("Week", "wk", 604800.0),
    },
}


def convert_unit(value, from_unit, to_unit, category):
    """Convert value between two units of one category; 0 for non-finite input or unknown units."""
    if not math.isfinite(value):
        return 0
    units = UNITS.get(category, {})
    source = units.get(from_unit)
    target = units.get(to_unit)
    if source is None or target is None:
        return 0

    base_value = (value - source["offset"]) * source["factor"]
    return base_value / target["factor"] + target["offset"]


def get_conversion_rate(from_unit, to_unit, category):
    return convert_unit(1, from_unit, to_unit, category)


def format_unit_value(value):
    if not math.isfinite(value):
        return "---"
    if value == 0:
        return "0"
    if abs(value) < 0.0001 or abs(value) >= 1000000:
        return f"{value:.4e}"
    text = f"{value:,.6f}".rstrip("0").rstrip(".")
    return text
