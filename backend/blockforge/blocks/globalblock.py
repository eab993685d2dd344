"""
Global block.

Embeds the blocks of a published ``global_blocks`` document. Embedding is
bounded by the render context's depth: a global block inside an embedded
document renders a notice instead of its content.
"""
import logging

from markupsafe import Markup

from blockforge.schema.block import BlockType

logger = logging.getLogger(__name__)

MAX_DEPTH_MESSAGE = (
    "Global Block: Maximum recursion depth reached. "
    "Cannot nest global blocks more than {depth} level{plural} deep."
)


def max_depth_message(max_depth: int) -> str:
    return MAX_DEPTH_MESSAGE.format(depth=max_depth, plural="" if max_depth == 1 else "s")


class GlobalBlock(BlockType):
    name = "wt/globalblock"
    title = "Global Block"
    description = "Renders content from a selected Global Block post"
    icon = "admin-site"

    field_definitions = [
        {
            "type": "post_object",
            "id": "global_block_id",
            "label": "Select Global Block",
            "description": "Choose a global block to display",
            "post_types": "global_blocks",
        },
    ]

    def render(self, attributes, ctx=None):
        if ctx is not None and ctx.depth_exceeded:
            logger.info("Global block nested %d levels deep; not rendering", ctx.depth)
            return Markup(
                '<div class="webtero-global-block-error"><p>{}</p></div>'
            ).format(max_depth_message(ctx.max_depth))
        return super().render(attributes, ctx)

    def prepare_render_data(self, values, ctx):
        values["recursion_depth"] = ctx.depth
        values["content"] = None
        values["found"] = False

        global_block_id = values.get("global_block_id")
        try:
            global_block_id = int(global_block_id or 0)
        except (TypeError, ValueError):
            global_block_id = 0
        values["global_block_id"] = global_block_id
        if not global_block_id:
            return values

        schema = self.field_schemas[0]
        blocks = ctx.resolve_document(global_block_id, schema.post_types)
        if blocks is None:
            return values

        values["found"] = True
        if ctx.registry is not None:
            values["content"] = Markup(ctx.registry.render_blocks(blocks, ctx.nested()))
        return values
