from rolo import Response as RoloResponse

from localsns.constants import TEXT_XML
from localsns.utils.strings import to_bytes


class Response(RoloResponse):
    """
    An HTTP Response object, which simply extends rolo's Response object with a few convenience methods.
    """

    def set_xml(self, document: str):
        """
        Sets the given XML document as response body, and sets the mimetype to ``text/xml``.

        :param document: the serialized XML document
        """
        self.data = to_bytes(document)
        self.mimetype = TEXT_XML

    @classmethod
    def for_xml(cls, document: str, *args, **kwargs) -> "Response":
        """
        Creates a new XML response from the given serialized document.

        :param document: the serialized XML document
        :param args: arguments passed to the ``Response`` constructor
        :param kwargs: keyword arguments passed to the ``Response`` constructor
        :return: a new Response object
        """
        response = cls(*args, **kwargs)
        response.set_xml(document)
        return response
