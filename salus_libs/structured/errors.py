class StructuredGenerationError(Exception):
    """Base class for structured generation failures."""


class GenerationTransportError(StructuredGenerationError):
    """The generation service could not produce a usable answer. Never retried."""


class UpstreamUnavailable(GenerationTransportError):
    """Network, timeout, credential or service-side error."""


class UnexpectedResponseShape(GenerationTransportError):
    """The service answered but returned no usable text candidate."""


class SchemaMalformed(StructuredGenerationError):
    """The schema text is not JSON or not a valid JSON Schema."""


class DocumentMalformed(StructuredGenerationError):
    """The document text is not parseable JSON."""
