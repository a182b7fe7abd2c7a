"""6.2.5 OPTIONS on the baseURL.

All implementations MUST support OPTIONS on the baseURL of each HDR and return
a status code of 200, along with the X-hdata-security, X-hdata-hcp and
X-hdata-extensions HTTP headers. The response SHOULD NOT include an HTTP body.

The header clauses inspect the response retained by BaseUrlOptions instead of
repeating the request.
"""

from typing import ClassVar

from hdata_conformance.context import ConformanceContext, HttpResponse
from hdata_conformance.models.status import FAILED, SKIPPED, SUCCESS
from hdata_conformance.units.base import TestUnit


class BaseUrlOptions(TestUnit):
    id = "6.2.5.1"
    name = "OPTIONS on HDR baseURL MUST return 200 status code"
    required = True

    async def execute(self, context: ConformanceContext) -> None:
        response = await context.request("OPTIONS", context.base_url())
        self.assert_equal(200, response.status)
        # X-hdata-* headers are checked by the dependent units
        self.artifact = response
        self.set_status(SUCCESS)


class OptionsResponseCheck(TestUnit):
    """Base for clauses checked against the retained OPTIONS response."""

    depends_on = (BaseUrlOptions.id,)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.request_property(BaseUrlOptions.id, "retain", True)

    async def execute(self, context: ConformanceContext) -> None:
        response = self.prerequisite_artifact(BaseUrlOptions.id)
        if response is None:
            self.log.error("Failed to retrieve prerequisite test results")
            self.set_status(SKIPPED, "Failed to retrieve prerequisite test results")
            return
        self.check(response)

    def check(self, response: HttpResponse) -> None:
        raise NotImplementedError


class OptionsHeaderCheck(OptionsResponseCheck):
    header: ClassVar[str]

    def check(self, response: HttpResponse) -> None:
        if response.header(self.header) is None:
            self.set_status(
                FAILED, f"Must set required {self.header} HTTP header in response"
            )
            return
        self.set_status(SUCCESS)


class BaseUrlOptionsSecurityHeader(OptionsHeaderCheck):
    id = "6.2.5.2"
    name = "OPTIONS on HDR baseURL MUST return X-hdata-security HTTP header"
    header = "X-hdata-security"


class BaseUrlOptionsHcpHeader(OptionsHeaderCheck):
    id = "6.2.5.3"
    name = "OPTIONS on HDR baseURL MUST return X-hdata-hcp HTTP header"
    header = "X-hdata-hcp"


class BaseUrlOptionsExtHeader(OptionsHeaderCheck):
    id = "6.2.5.4"
    name = "OPTIONS on HDR baseURL MUST return X-hdata-extensions HTTP header"
    header = "X-hdata-extensions"


class BaseUrlOptionsNoBody(OptionsResponseCheck):
    id = "6.2.5.6"
    name = "OPTIONS response SHOULD NOT include an HTTP body"
    required = False

    def check(self, response: HttpResponse) -> None:
        if response.body:
            self.set_status(FAILED, "Response includes a HTTP body")
            return
        self.set_status(SUCCESS)


class BaseUrlOptionsNotFound(TestUnit):
    id = "6.2.5.7"
    name = "OPTIONS operation on non-existent HDR baseURL SHOULD return 404"
    required = False

    async def execute(self, context: ConformanceContext) -> None:
        url = context.invalid_base_url()
        if url is None:
            self.set_status(
                SKIPPED, "invalid_base_url is not specified in the configuration"
            )
            return

        response = await context.request("OPTIONS", url)
        if response.status != 404:
            self.set_status(
                FAILED, f"Expected 404 HTTP status code but was: {response.status}"
            )
            return
        self.set_status(SUCCESS)
