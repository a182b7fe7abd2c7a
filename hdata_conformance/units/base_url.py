"""6.2.1 GET operation on the baseURL.

The server MUST offer an Atom 1.0 compliant feed of all child sections
specified in the HRF specification, as identified in the corresponding
sections node in the root document.

Status codes: 200, 404, 405 (HTML representation not implemented)
"""

from typing import ClassVar

from hdata_conformance.context import ConformanceContext, HttpResponse
from hdata_conformance.models.status import FAILED, SKIPPED, SUCCESS
from hdata_conformance.units.base import TestUnit
from hdata_conformance.units.mime import (
    MIME_APPLICATION_ATOM_XML,
    MIME_APPLICATION_XHTML,
    MIME_TEXT_HTML,
    NAMESPACE_W3_ATOM_2005,
)

# Smallest well-formed Atom feed document
MIN_FEED_LENGTH = 43


class BaseUrlGet(TestUnit):
    """GET on the baseURL with an explicit Atom Accept header."""

    id = "6.2.1.4"
    name = (
        "GET operation on baseURL MUST return Atom 1.0 feed of child sections "
        "if accept header is application/atom+xml"
    )
    required = True

    # None omits the Accept header altogether
    accept: ClassVar[str | None] = MIME_APPLICATION_ATOM_XML

    async def execute(self, context: ConformanceContext) -> None:
        if self.accept is None:
            response = await context.request(
                "GET", context.base_url(), skip_auto_headers=("Accept",)
            )
        else:
            response = await context.request(
                "GET", context.base_url(), headers={"Accept": self.accept}
            )
        self.validate_content(response)

    def validate_content(self, response: HttpResponse) -> None:
        if response.status != 200:
            self.set_status(FAILED, f"Unexpected HTTP response: {response.status}")
            return

        content_type = response.content_type
        if content_type == MIME_TEXT_HTML:
            self.set_status(
                FAILED, "Expected application/atom+xml content-type but was: text/html"
            )
            return
        if content_type != MIME_APPLICATION_ATOM_XML:
            # text/xml or application/xml are still acceptable
            self.add_warning(
                f"Expected application/atom+xml content-type but was: {content_type}"
            )

        self.assert_true(
            len(response.body) >= MIN_FEED_LENGTH,
            "Expecting valid ATOM XML document for baseURL; "
            f"returned length was {len(response.body)}",
        )
        self.assert_true(
            NAMESPACE_W3_ATOM_2005.encode() in response.body,
            f"Expected feed in the {NAMESPACE_W3_ATOM_2005} namespace",
        )

        self.artifact = response
        self.set_status(SUCCESS)


class BaseUrlGetNoAccept(BaseUrlGet):
    id = "6.2.1.2"
    name = (
        "GET operation on baseURL MUST return Atom 1.0 feed of child sections "
        "if accept header is non-existent"
    )
    accept = None


class BaseUrlGetStarAccept(BaseUrlGet):
    id = "6.2.1.3"
    name = (
        "GET operation on baseURL MUST return Atom 1.0 feed of child sections "
        "if accept header is */*"
    )
    accept = "*/*"


class BaseUrlGetHtmlAccept(BaseUrlGet):
    """Content negotiation towards the recommended web user interface.

    Serving HTML is optional, so 405 is as good as 200 here.
    """

    id = "6.2.1.5"
    name = (
        "GET operation on baseURL with text/html Accept header may return HTML "
        "document if implemented otherwise must return 405"
    )
    required = False
    accept = f"{MIME_TEXT_HTML}, {MIME_APPLICATION_XHTML}"

    def validate_content(self, response: HttpResponse) -> None:
        if response.status == 405:
            self.set_status(SUCCESS)
            return
        if response.status != 200:
            self.set_status(FAILED, f"Unexpected HTTP response: {response.status}")
            return
        if response.content_type not in {MIME_TEXT_HTML, MIME_APPLICATION_XHTML}:
            self.add_warning(
                f"Expected text/html content-type but was: {response.content_type}"
            )
        self.set_status(SUCCESS)


class BaseUrlNotFound(TestUnit):
    """GET on a baseURL that does not exist."""

    id = "6.2.1.1"
    name = "GET operation on non-existent HDR baseURL SHOULD return 404"
    required = False

    async def execute(self, context: ConformanceContext) -> None:
        url = context.invalid_base_url()
        if url is None:
            self.set_status(
                SKIPPED, "invalid_base_url is not specified in the configuration"
            )
            return

        response = await context.request(
            "GET", url, headers={"Accept": MIME_APPLICATION_ATOM_XML}
        )
        if response.status == 404:
            self.set_status(SUCCESS)
        else:
            self.set_status(
                FAILED, f"Expected 404 HTTP status code but was: {response.status}"
            )
