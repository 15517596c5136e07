from pydantic import BaseModel, ConfigDict, Field

OTHER_PREFIX = "Other: "


class Category(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)

    id: str
    name: str
    options: list[str]
    allow_other: bool = Field(alias="allowOther")


class InteractiveStructure(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True, frozen=True)

    title: str
    categories: list[Category]

    def summarize(self, selections: dict[str, str]) -> str:
        """Render chosen answers as ``"<category name>: <value>, ..."``.

        Categories are listed in form order; unanswered ones are skipped.
        """
        parts = []
        for category in self.categories:
            value = (selections.get(category.id) or "").strip()
            if value:
                parts.append(f"{category.name}: {value}")
        return ", ".join(parts)


def other_answer(text: str) -> str:
    return f"{OTHER_PREFIX}{text}"
