"""Conformance test units."""

from collections.abc import Sequence

from hdata_conformance.units.base import PendingProperty, TestUnit, UnitOptions
from hdata_conformance.units.base_url import (
    BaseUrlGet,
    BaseUrlGetHtmlAccept,
    BaseUrlGetNoAccept,
    BaseUrlGetStarAccept,
    BaseUrlNotFound,
)
from hdata_conformance.units.options import (
    BaseUrlOptions,
    BaseUrlOptionsExtHeader,
    BaseUrlOptionsHcpHeader,
    BaseUrlOptionsNoBody,
    BaseUrlOptionsNotFound,
    BaseUrlOptionsSecurityHeader,
)
from hdata_conformance.units.root_xml import (
    BaseUrlRootXml,
    BaseUrlRootXmlDelete,
    BaseUrlRootXmlNotFound,
)


def default_units() -> Sequence[TestUnit]:
    """Instantiate every built-in clause check.

    Order does not matter: prerequisites are ordered by the execution plan.
    """
    return [
        BaseUrlNotFound(),
        BaseUrlGetNoAccept(),
        BaseUrlGetStarAccept(),
        BaseUrlGet(),
        BaseUrlGetHtmlAccept(),
        BaseUrlOptions(),
        BaseUrlOptionsSecurityHeader(),
        BaseUrlOptionsHcpHeader(),
        BaseUrlOptionsExtHeader(),
        BaseUrlOptionsNoBody(),
        BaseUrlOptionsNotFound(),
        BaseUrlRootXml(),
        BaseUrlRootXmlNotFound(),
        BaseUrlRootXmlDelete(),
    ]


__all__ = [
    "BaseUrlGet",
    "BaseUrlGetHtmlAccept",
    "BaseUrlGetNoAccept",
    "BaseUrlGetStarAccept",
    "BaseUrlNotFound",
    "BaseUrlOptions",
    "BaseUrlOptionsExtHeader",
    "BaseUrlOptionsHcpHeader",
    "BaseUrlOptionsNoBody",
    "BaseUrlOptionsNotFound",
    "BaseUrlOptionsSecurityHeader",
    "BaseUrlRootXml",
    "BaseUrlRootXmlDelete",
    "BaseUrlRootXmlNotFound",
    "PendingProperty",
    "TestUnit",
    "UnitOptions",
    "default_units",
]
