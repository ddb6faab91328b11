"""Category aggregate root for grouping products on the shop page."""

from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String, Text

from catalogue.domain import catalogue
from catalogue.shared.slug import slugify


@catalogue.aggregate
class Category:
    """A flat product grouping shown as a filter on the shop page.

    Categories are listed by ``sort_order``; hidden categories stay in the
    catalogue but are not offered to shoppers.
    """

    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120)
    description: Text()
    image_url: String(max_length=500)
    is_visible: Boolean(default=True)
    sort_order: Integer(default=0)
    created_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, name, description=None, image_url=None, is_visible=True, sort_order=0):
        from catalogue.category.events import CategoryCreated

        slug = slugify(name)
        if not slug:
            raise ValidationError({"name": ["Category name must contain letters or digits"]})

        category = cls(
            name=name,
            slug=slug,
            description=description,
            image_url=image_url,
            is_visible=is_visible,
            sort_order=sort_order,
            created_at=datetime.now(),
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=name,
                slug=slug,
                sort_order=sort_order,
            )
        )
        return category


@catalogue.repository(part_of=Category)
class CategoryRepository:
    def visible(self):
        return self._dao.query.filter(is_visible=True).order_by("sort_order").all().items
