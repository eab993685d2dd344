from blockforge.schema.block import BlockType


class GalleryBlock(BlockType):
    """Image grid with selectable, reorderable images."""

    name = "wt/gallery"
    title = "Gallery"
    description = "Block with gallery field for multiple image selection and reordering"
    icon = "format-gallery"

    field_definitions = [
        {
            "type": "gallery",
            "id": "gallery_images",
            "label": "Gallery Images",
            "description": "Select multiple images and reorder them",
            "default": [],
            "allowed_types": ["image"],
        },
        {
            "type": "select",
            "id": "columns",
            "label": "Columns",
            "default": "3",
            "options": {"2": "2 columns", "3": "3 columns", "4": "4 columns"},
        },
    ]

    def prepare_render_data(self, values, ctx):
        images = []
        for image_id in values.get("gallery_images") or []:
            try:
                image_id = int(image_id)
            except (TypeError, ValueError):
                continue
            if image_id <= 0:
                continue

            metadata = ctx.resolve_media(image_id)
            if metadata is None or not metadata.url:
                continue
            images.append({"id": image_id, "url": metadata.url, "alt": metadata.title})

        values["images"] = images
        return values
