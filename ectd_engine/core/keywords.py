from __future__ import annotations

from typing import Dict, List, Sequence

from .code_systems import CodedValue, keyword_type_code
from .errors import create_unknown_keyword_type_error, create_unresolved_reference_error
from .manifest_templates import keyword_definition, keyword_reference
from .schemas import Document, Keyword
from .xml_tree import XmlNode


class KeywordCatalog:
    """
    Sender-defined keywords of one configuration, resolved up front.

    Construction fails with ``UnknownKeywordTypeError`` if any keyword type has
    no registered code, so a catalog that exists is always fully typed.
    """

    def __init__(self, keywords: Sequence[Keyword]):
        self.keywords = list(keywords)
        self._type_codes: List[CodedValue] = []
        for index, keyword in enumerate(self.keywords):
            type_code = keyword_type_code(keyword.type)
            if type_code is None:
                raise create_unknown_keyword_type_error(keyword.type, index)
            self._type_codes.append(type_code)
        self._by_code: Dict[str, Keyword] = {kw.code: kw for kw in self.keywords}

    def __len__(self) -> int:
        return len(self.keywords)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def resolve(self, code: str, document_index: int) -> CodedValue:
        """Code/code-system pair for a referenced keyword code."""
        keyword = self._by_code.get(code)
        if keyword is None:
            raise create_unresolved_reference_error(code, document_index)
        return CodedValue(code=keyword.code, codeSystem=keyword.codeSystem, name=keyword.displayName)

    def check_documents(self, documents: Sequence[Document]) -> None:
        """Raise on the first ``keywordRefs`` entry with no matching keyword."""
        for index, document in enumerate(documents):
            for code in document.keywordRefs:
                self.resolve(code, index)

    def definitions(self) -> List[XmlNode]:
        """One definition per keyword, referenced or not."""
        return [
            keyword_definition(type_code, kw.code, kw.codeSystem, kw.displayName)
            for kw, type_code in zip(self.keywords, self._type_codes)
        ]

    def references(self, codes: Sequence[str], document_index: int) -> List[XmlNode]:
        return [keyword_reference(self.resolve(code, document_index)) for code in codes]

    def unreferenced(self, documents: Sequence[Document]) -> List[str]:
        used = {code for document in documents for code in document.keywordRefs}
        return [kw.code for kw in self.keywords if kw.code not in used]
