"""Immutable domain model for Notion API payloads.

Every family of wire objects is a tagged union with one decoder
dispatching on its discriminant.  Field values that are absent from the
wire are :data:`OMITTED`; fields sent as ``null`` are ``None``.
"""

from __future__ import annotations

from ._wire import OMITTED, ModelDecodeError, encode
from .blocks import (
    BLOCK_TYPES,
    Audio,
    Block,
    BlockContent,
    Bookmark,
    Breadcrumb,
    BulletedListItem,
    Callout,
    ChildDatabase,
    ChildPage,
    Code,
    Column,
    ColumnList,
    Divider,
    Embed,
    Equation,
    FileBlock,
    Heading1,
    Heading2,
    Heading3,
    Image,
    LinkPreview,
    LinkToPage,
    NumberedListItem,
    Paragraph,
    Pdf,
    Quote,
    SyncedBlock,
    Table,
    TableOfContents,
    TableRow,
    Template,
    ToDo,
    Toggle,
    Unsupported,
    Video,
    decode_block,
    decode_block_content,
    encode_block_content,
)
from .common import (
    Annotations,
    BlockParent,
    BotUser,
    DatabaseMention,
    DatabaseParent,
    DateMention,
    DateRange,
    EmojiIcon,
    EquationRichText,
    ExternalFile,
    File,
    HostedFile,
    Icon,
    LinkPreviewMention,
    Mention,
    MentionRichText,
    PageMention,
    PageParent,
    Parent,
    PartialUser,
    PersonUser,
    RichText,
    SelectOption,
    TextRichText,
    User,
    UserMention,
    WorkspaceParent,
    decode_file,
    decode_icon,
    decode_mention,
    decode_parent,
    decode_rich_text,
    decode_user,
    extract_plain_text,
    text,
)
from .objects import (
    APIErrorPayload,
    Comment,
    Database,
    Page,
    PaginatedList,
    PropertySchema,
    RemoteObject,
    decode_comment,
    decode_database,
    decode_object,
    decode_page,
    decode_page_or_database,
    paginated,
)
from .properties import (
    PROPERTY_TYPES,
    ArrayRollup,
    BooleanFormula,
    CheckboxValue,
    CreatedByValue,
    CreatedTimeValue,
    DateFormula,
    DateRollup,
    DateValue,
    EmailValue,
    FilesValue,
    FormulaResult,
    FormulaValue,
    LastEditedByValue,
    LastEditedTimeValue,
    MultiSelectValue,
    NumberFormula,
    NumberRollup,
    NumberValue,
    PeopleValue,
    PhoneNumberValue,
    PropertyValue,
    RelationValue,
    RichTextValue,
    RollupResult,
    RollupValue,
    SelectValue,
    StatusValue,
    StringFormula,
    TitleValue,
    UniqueId,
    UniqueIdValue,
    UnsupportedRollup,
    UnsupportedValue,
    UrlValue,
    Verification,
    VerificationValue,
    decode_formula_result,
    decode_property_value,
    decode_rollup_result,
    encode_properties,
)

__all__ = [
    "BLOCK_TYPES",
    "OMITTED",
    "PROPERTY_TYPES",
    "APIErrorPayload",
    "Annotations",
    "ArrayRollup",
    "Audio",
    "Block",
    "BlockContent",
    "BlockParent",
    "Bookmark",
    "BooleanFormula",
    "BotUser",
    "Breadcrumb",
    "BulletedListItem",
    "Callout",
    "CheckboxValue",
    "ChildDatabase",
    "ChildPage",
    "Code",
    "Column",
    "ColumnList",
    "Comment",
    "CreatedByValue",
    "CreatedTimeValue",
    "Database",
    "DatabaseMention",
    "DatabaseParent",
    "DateFormula",
    "DateMention",
    "DateRange",
    "DateRollup",
    "DateValue",
    "Divider",
    "EmailValue",
    "Embed",
    "EmojiIcon",
    "Equation",
    "EquationRichText",
    "ExternalFile",
    "File",
    "FileBlock",
    "FilesValue",
    "FormulaResult",
    "FormulaValue",
    "Heading1",
    "Heading2",
    "Heading3",
    "HostedFile",
    "Icon",
    "Image",
    "LastEditedByValue",
    "LastEditedTimeValue",
    "LinkPreview",
    "LinkPreviewMention",
    "LinkToPage",
    "Mention",
    "MentionRichText",
    "ModelDecodeError",
    "MultiSelectValue",
    "NumberFormula",
    "NumberRollup",
    "NumberValue",
    "NumberedListItem",
    "Page",
    "PageMention",
    "PageParent",
    "PaginatedList",
    "Paragraph",
    "Parent",
    "PartialUser",
    "Pdf",
    "PeopleValue",
    "PersonUser",
    "PhoneNumberValue",
    "PropertySchema",
    "PropertyValue",
    "Quote",
    "RelationValue",
    "RemoteObject",
    "RichText",
    "RichTextValue",
    "RollupResult",
    "RollupValue",
    "SelectOption",
    "SelectValue",
    "StatusValue",
    "StringFormula",
    "SyncedBlock",
    "Table",
    "TableOfContents",
    "TableRow",
    "Template",
    "TextRichText",
    "TitleValue",
    "ToDo",
    "Toggle",
    "UniqueId",
    "UniqueIdValue",
    "Unsupported",
    "UnsupportedRollup",
    "UnsupportedValue",
    "UrlValue",
    "User",
    "UserMention",
    "Verification",
    "VerificationValue",
    "Video",
    "WorkspaceParent",
    "decode_block",
    "decode_block_content",
    "decode_comment",
    "decode_database",
    "decode_file",
    "decode_formula_result",
    "decode_icon",
    "decode_mention",
    "decode_object",
    "decode_page",
    "decode_page_or_database",
    "decode_parent",
    "decode_property_value",
    "decode_rich_text",
    "decode_rollup_result",
    "decode_user",
    "encode",
    "encode_block_content",
    "encode_properties",
    "extract_plain_text",
    "paginated",
    "text",
]
