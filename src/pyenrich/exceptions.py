"""Exceptions raised by the enrichment core."""


class EnrichmentError(RuntimeError):
    def __init__(self, message="Stellar enrichment failed"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(EnrichmentError):
    def __init__(self, message="Invalid stellar evolution setup"):
        super().__init__(message)


class TableError(ConfigurationError):
    def __init__(self, message="Malformed stellar yield or lifetime table"):
        super().__init__(message)
