from ccpolicy import Headers, Request, Response


def test_headers_are_case_insensitive():
    headers = Headers({"Content-Type": "text/plain", "Vary": ["Accept", "Cookie"]})

    assert headers["content-type"] == "text/plain"
    assert headers["VARY"] == "Accept, Cookie"
    assert "vary" in headers
    assert 1 not in headers
    assert headers.get_list("Vary") == ["Accept", "Cookie"]


def test_headers_add_and_set():
    headers = Headers()

    headers.add("Cache-Control", "no-cache")
    headers.add("cache-control", "no-store")
    assert headers.get_list("Cache-Control") == ["no-cache", "no-store"]
    assert headers.multi_items() == [("cache-control", "no-cache"), ("cache-control", "no-store")]

    headers["Cache-Control"] = "public"
    assert headers.get_list("cache-control") == ["public"]

    del headers["CACHE-CONTROL"]
    assert len(headers) == 0
    assert headers.get("cache-control") is None


def test_request_is_ajax():
    assert Request("GET", "/", Headers({"X-Requested-With": "XMLHttpRequest"})).is_ajax
    assert not Request("GET", "/").is_ajax


def test_response_is_error():
    assert not Response(200).is_error
    assert not Response(304).is_error
    assert Response(404).is_error
    assert Response(503).is_error
