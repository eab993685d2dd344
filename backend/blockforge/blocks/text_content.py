from blockforge.editor.store import Encoding
from blockforge.schema.block import BlockType


class TextContentBlock(BlockType):
    name = "wt/text-content"
    title = "Text Content"
    description = "Title and rich text content"
    icon = "text"
    # Instances of this block have always been stored as one JSON blob
    encoding = Encoding.BLOB

    field_definitions = [
        {
            "type": "text",
            "id": "title",
            "label": "Title",
            "default": "",
            "placeholder": "Enter title...",
            "help": "Optional title for this content block",
        },
        {
            "type": "tiptap",
            "id": "content",
            "label": "Content",
            "default": "",
            "placeholder": "Enter your content here...",
            "help": "Main content with rich text editing",
        },
    ]

    def placeholder_data(self):
        return {
            "title": "Sample Title",
            "content": (
                '<p>This is sample content. Click "Edit" in the toolbar above to add your own content.</p>'
                "<p>You can use the rich text editor to format your text, add links, and more.</p>"
            ),
        }
