"""Category management — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.category.category import Category
from catalogue.domain import catalogue
from catalogue.shared.slug import slugify


@catalogue.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    image_url: String(max_length=500)
    is_visible: Boolean(default=True)
    sort_order: Integer(default=0)


@catalogue.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        if repo._dao.query.filter(slug=slugify(command.name)).all().items:
            raise ValidationError({"name": ["A category with this name already exists"]})

        category = Category.create(
            name=command.name,
            description=command.description,
            image_url=command.image_url,
            is_visible=command.is_visible if command.is_visible is not None else True,
            sort_order=command.sort_order or 0,
        )
        repo.add(category)
        return str(category.id)
