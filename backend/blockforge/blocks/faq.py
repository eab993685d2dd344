from blockforge.schema.block import BlockType


class FaqBlock(BlockType):
    """Frequently asked questions with repeatable items."""

    name = "wt/faq"
    title = "FAQ"
    description = "Frequently Asked Questions with repeatable items"
    icon = "editor-help"

    field_definitions = [
        {
            "type": "repeater",
            "id": "faq_items",
            "label": "FAQ Items",
            "description": "Add frequently asked questions",
            "default": [],
            "min": 0,
            "max": 50,
            "fields": [
                {
                    "type": "text",
                    "id": "heading",
                    "label": "Question",
                    "description": "FAQ question/heading",
                    "default": "",
                },
                {
                    "type": "tiptap",
                    "id": "text_content",
                    "label": "Answer",
                    "description": "FAQ answer content",
                    "default": "",
                },
            ],
        },
    ]

    def placeholder_data(self):
        return {
            "faq_items": [
                {
                    "heading": "What is your return policy?",
                    "text_content": "<p>We offer a 30-day return policy on all items. Items must be in original condition with tags attached.</p>",
                },
                {
                    "heading": "How long does shipping take?",
                    "text_content": "<p>Standard shipping takes 5-7 business days. Express shipping is available for 2-3 business days.</p>",
                },
                {
                    "heading": "Do you ship internationally?",
                    "text_content": "<p>Yes, we ship to most countries worldwide. International shipping times vary by destination.</p>",
                },
            ],
        }

    def prepare_render_data(self, values, ctx):
        # Rows with neither a question nor an answer are not shown
        values["faq_items"] = [
            row for row in values.get("faq_items") or []
            if isinstance(row, dict) and (row.get("heading") or row.get("text_content"))
        ]
        return values
