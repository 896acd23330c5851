import pytest
from pydantic import ValidationError

from app.models import Movie, MoviesPage, PageRequest, SortRequest, sort_param


def test_movie_is_immutable() -> None:
    movie = Movie(id=1, title="Alien")

    with pytest.raises(ValidationError):
        movie.title = "Aliens"  # type: ignore[misc]


def test_movie_payload_uses_camel_case_image_and_fallback_title() -> None:
    movie = Movie.model_validate({"id": 42, "imageUrl": "https://example.com/p.jpg"})

    payload = movie.to_payload(favorite=True)

    assert payload == {
        "id": 42,
        "imageUrl": "https://example.com/p.jpg",
        "title": "TMDb 42",
        "overview": "",
        "rating": None,
        "year": None,
        "favorite": True,
    }


def test_movies_page_rejects_negative_totals() -> None:
    with pytest.raises(ValidationError):
        MoviesPage(total_pages=-1)


def test_page_request_accepts_camel_case_sort() -> None:
    request = PageRequest.model_validate(
        {"page": 2, "sortBy": "revenue", "sortOrder": "asc", "wait": True}
    )

    assert request.page == 2
    assert request.sort_by == "revenue"
    assert request.sort_order == "asc"
    assert request.wait is True


@pytest.mark.parametrize(
    "payload",
    [{"page": 0}, {"page": 1, "sortBy": "box_office"}, {"page": 1, "sortOrder": "up"}],
)
def test_page_request_validation(payload: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        PageRequest.model_validate(payload)


def test_sort_request_defaults_to_descending() -> None:
    request = SortRequest.model_validate({"sortBy": "vote_count"})

    assert request.sort_order == "desc"
    assert sort_param(request.sort_by, request.sort_order) == "vote_count.desc"
