from dashboard_client.keys import ResourceRequest, segment, transform_path


def test_key_without_params_is_the_path() -> None:
    assert ResourceRequest.get("/api/services").key == "/api/services"


def test_key_keeps_param_insertion_order() -> None:
    req = ResourceRequest.get("/api/events", [("namespace", "mail"), ("name", "x")])
    assert req.key == "/api/events?namespace=mail&name=x"


def test_equal_requests_share_a_key() -> None:
    a = ResourceRequest.get("/api/metrics", {"q": "http_requests_total"})
    b = ResourceRequest.get("/api/metrics", [("q", "http_requests_total")])
    assert a == b
    assert a.key == b.key


def test_query_values_are_encoded() -> None:
    req = ResourceRequest.get("/api/metrics", {"q": 'app{service="Pet Store"}'})
    assert req.key == "/api/metrics?q=app%7Bservice%3D%22Pet+Store%22%7D"


def test_post_key_never_collides_with_get() -> None:
    post = ResourceRequest.post("/api/schema/example", {"name": "x"})
    assert post.key == "POST /api/schema/example"
    assert post.key != ResourceRequest.get("/api/schema/example").key


def test_headers_do_not_change_the_key() -> None:
    plain = ResourceRequest.get("/api/configs")
    with_accept = ResourceRequest.get("/api/configs", headers={"Accept": "application/json"})
    assert plain.key == with_accept.key


def test_transform_path_joins_base() -> None:
    assert transform_path("http://host:8080/", "/api/info") == "http://host:8080/api/info"
    assert transform_path("http://host:8080", "api/info") == "http://host:8080/api/info"
    assert transform_path("", "/demo/x.png") == "/demo/x.png"
    assert transform_path("http://host", "https://other/x") == "https://other/x"


def test_segment_quotes_reserved_characters() -> None:
    assert segment("Swagger Petstore") == "Swagger%20Petstore"
    assert segment("alice@example.com") == "alice@example.com"
    assert segment("a/b") == "a%2Fb"
