"""Release artifact parsing for distrolog.

This package turns the loosely structured build artifacts of a product
release into version strings.

Modules:
    matchers : Pure text matchers, one per artifact kind.
    gomod : go.mod parser (require and replace directives).
    bundle : ArtifactBundle, the in-memory artifact set of one release.
    sources : Product lines, artifact URLs, and retrieval.

Example:
    from distrolog.artifacts import ProductLine, fetch_bundle

    bundle = fetch_bundle(ProductLine.K3S, "v1.27.3+k3s1")
    print(bundle.go_dependency("kine"))

"""

from .bundle import ArtifactBundle
from .sources import ProductLine, fetch_bundle

__all__ = ["ArtifactBundle", "ProductLine", "fetch_bundle"]
