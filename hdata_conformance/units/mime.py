"""Media types and namespaces referenced by the clause checks."""

MIME_APPLICATION_ATOM_XML = "application/atom+xml"
MIME_APPLICATION_XML = "application/xml"
MIME_TEXT_XML = "text/xml"
MIME_TEXT_HTML = "text/html"
MIME_APPLICATION_XHTML = "application/xhtml+xml"

NAMESPACE_W3_ATOM_2005 = "http://www.w3.org/2005/Atom"
