"""6.3 baseURL/root.xml."""

from hdata_conformance.context import ConformanceContext
from hdata_conformance.models.status import FAILED, SKIPPED, SUCCESS
from hdata_conformance.units.base import TestUnit
from hdata_conformance.units.mime import MIME_APPLICATION_XML, MIME_TEXT_XML

# Smallest well-formed root document
MIN_ROOT_LENGTH = 66


class BaseUrlRootXml(TestUnit):
    id = "6.3.1.1"
    name = "GET operation on baseURL/root.xml MUST return XML object with 200 status code"
    required = True

    async def execute(self, context: ConformanceContext) -> None:
        response = await context.request(
            "GET",
            context.base_url("root.xml"),
            headers={"Accept": MIME_APPLICATION_XML},
        )
        if response.status != 200:
            self.set_status(FAILED, f"Unexpected HTTP response: {response.status}")
            return
        if not response.body:
            self.set_status(FAILED, "Expect XML in body of response")
            return

        content_type = response.content_type
        if content_type not in {MIME_TEXT_XML, MIME_APPLICATION_XML}:
            self.add_warning(
                f"Expected supported xml content-type but was: {content_type}"
            )
        self.assert_true(
            len(response.body) >= MIN_ROOT_LENGTH,
            "Expecting valid XML document for baseURL/root.xml; "
            f"returned length was {len(response.body)}",
        )

        self.artifact = response
        self.set_status(SUCCESS)


class BaseUrlRootXmlNotFound(TestUnit):
    id = "6.3.1.2"
    name = (
        "If baseURL does not exist then GET on baseURL/root.xml "
        "MUST return 404 status code"
    )
    required = False

    async def execute(self, context: ConformanceContext) -> None:
        url = context.invalid_base_url("root.xml")
        if url is None:
            self.set_status(
                SKIPPED, "invalid_base_url is not specified in the configuration"
            )
            return

        response = await context.request(
            "GET", url, headers={"Accept": MIME_APPLICATION_XML}
        )
        if response.status != 404:
            self.set_status(
                FAILED, f"Expected 404 HTTP status code but was: {response.status}"
            )
            return
        self.set_status(SUCCESS)


class BaseUrlRootXmlDelete(TestUnit):
    id = "6.3.2.3"
    name = "baseURL/root.xml DELETE operation MUST NOT be implemented. Returns 405 status"
    required = True

    async def execute(self, context: ConformanceContext) -> None:
        response = await context.request("DELETE", context.base_url("root.xml"))
        self.assert_equal(405, response.status)
        self.set_status(SUCCESS)
