from colorsort.engine.gamevalidator.validator import ValidationReport, Validator

__all__ = ["ValidationReport", "Validator"]
