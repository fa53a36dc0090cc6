"""
Pydantic schemas for the two ButterCMS payload shapes seen in practice.

- PostPayload: blog posts, whose body is a single HTML string.
- PagePayload: pages, whose body is an array of components under ``fields``.
"""

from __future__ import annotations

from typing import Annotated, Any, Callable, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from seolens.protocols import BodyElement, Document, ElementBody, HtmlBody, Taxonomy


def _null_as(factory: Callable[[], Any]) -> BeforeValidator:
    return BeforeValidator(lambda v: factory() if v is None else v)


# ButterCMS sends null for unset fields.
Text = Annotated[str, _null_as(str)]


class TaxonomyPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Text = ""
    slug: Text = ""

    def to_taxonomy(self) -> Taxonomy:
        return Taxonomy(name=self.name, slug=self.slug)


TaxonomyList = Annotated[List[TaxonomyPayload], _null_as(list)]


class AuthorPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: Text = ""
    last_name: Text = ""
    slug: Text = ""

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name.strip(), self.last_name.strip()) if part)


class PostPayload(BaseModel):
    """A blog post with an HTML-string body."""

    model_config = ConfigDict(extra="ignore")

    slug: Text = ""
    url: Text = ""
    title: Text = ""
    body: str
    seo_title: Text = ""
    meta_description: Text = ""
    summary: Text = ""
    author: Optional[AuthorPayload] = None
    published: Optional[str] = None
    updated: Optional[str] = None
    featured_image: Optional[str] = None
    tags: TaxonomyList = Field(default_factory=list)
    categories: TaxonomyList = Field(default_factory=list)

    def to_document(self, source_url: str = "") -> Document:
        return Document(
            title=self.title,
            body=HtmlBody(markup=self.body),
            seo_title=self.seo_title,
            seo_description=self.meta_description,
            author=self.author.full_name if self.author else "",
            published=self.published,
            updated=self.updated,
            featured_image=self.featured_image or None,
            tags=tuple(tag.to_taxonomy() for tag in self.tags),
            categories=tuple(category.to_taxonomy() for category in self.categories),
            slug=self.slug,
            url=source_url or self.url,
        )


class ElementPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Text = ""
    fields: Annotated[Dict[str, Any], _null_as(dict)] = Field(default_factory=dict)

    def to_element(self) -> BodyElement:
        return BodyElement(type=self.type, fields=dict(self.fields))


class SeoPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Text = ""
    description: Text = ""


class PageFieldsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    seo: Annotated[SeoPayload, _null_as(dict)] = Field(default_factory=SeoPayload)
    headline: Text = ""
    title: Text = ""
    body: List[ElementPayload]


class PagePayload(BaseModel):
    """A page whose body is an array of components."""

    model_config = ConfigDict(extra="ignore")

    slug: Text = ""
    name: Text = ""
    published: Optional[str] = None
    updated: Optional[str] = None
    fields: PageFieldsPayload

    def hero_headline(self) -> str:
        for element in self.fields.body:
            headline = element.fields.get("headline")
            if element.type == "hero" and isinstance(headline, str):
                return headline
        return ""

    def to_document(self, source_url: str = "") -> Document:
        fields = self.fields
        return Document(
            title=fields.headline or fields.title or self.hero_headline() or fields.seo.title or self.name,
            body=ElementBody(elements=tuple(element.to_element() for element in fields.body)),
            seo_title=fields.seo.title,
            seo_description=fields.seo.description,
            published=self.published,
            updated=self.updated,
            slug=self.slug,
            url=source_url,
        )
