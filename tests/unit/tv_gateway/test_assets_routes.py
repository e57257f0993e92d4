from tv_gateway.assets import resolve_asset


def test_web_path_redirects_once_to_canonical_asset(client):
    res = client.get("/web/anything/http://cdn.example/abcd1234logo.png", follow_redirects=False)
    assert res.status_code == 302
    assert res.headers["location"] == "/assets/logo.png"


def test_web_redirect_lands_on_terminal_file(client):
    res = client.get("/web/x/https://cdn.example/abcd1234logo.png")
    assert res.status_code == 200
    assert len(res.history) == 1
    assert res.content == b"\x89PNG\r\n\x1a\nfake"
    assert res.headers["content-type"] == "image/png"


def test_web_redirect_to_missing_asset_ends_in_404(client):
    res = client.get("/web/x/http://cdn.example/ffffffffmissing.png")
    assert len(res.history) == 1
    assert res.status_code == 404
    assert res.text == "File not found"


def test_folder_is_discarded(client):
    a = client.get("/assets/folder-one/deep/0123abcdapp.js", follow_redirects=False)
    b = client.get("/assets/folder-two/app.js", follow_redirects=False)
    assert a.status_code == b.status_code == 302
    assert a.headers["location"] == b.headers["location"] == "/assets/app.js"


def test_terminal_route_serves_existing_file(client):
    res = client.get("/assets/app.js")
    assert res.status_code == 200
    assert res.history == []
    assert res.text == "console.log('tv');"


def test_terminal_route_strips_hash_without_redirect(client):
    res = client.get("/assets/1a2b3c4dlogo.png", follow_redirects=False)
    assert res.status_code == 200
    assert res.content.startswith(b"\x89PNG")


def test_missing_asset_is_plain_text_404(client, capsys):
    res = client.get("/assets/doesnotexist.png")
    assert res.status_code == 404
    assert res.text == "File not found"
    assert res.headers["content-type"].startswith("text/plain")
    out = capsys.readouterr().out
    assert '"event":"not_found"' in out
    assert "doesnotexist.png" in out


def test_location_is_percent_encoded(client):
    res = client.get("/assets/some-folder/my%20logo.png", follow_redirects=False)
    assert res.status_code == 302
    assert res.headers["location"] == "/assets/my%20logo.png"


def test_double_dot_is_rejected(client):
    res = client.get("/assets/a..b.png")
    assert res.status_code == 400
    assert res.text == "Invalid asset path"


def test_encoded_backslash_is_rejected(client):
    res = client.get("/assets/evil%5Cname.png")
    assert res.status_code == 400
    assert res.text == "Invalid asset path"


def test_empty_redirect_target_is_rejected(client):
    res = client.get("/web/nothing-here/", follow_redirects=False)
    assert res.status_code == 400


def test_resolve_asset_stays_inside_root(tmp_path):
    root = tmp_path / "assets"
    root.mkdir()
    (root / "ok.txt").write_text("ok")
    (tmp_path / "secret.txt").write_text("secret")
    (root / "sub").mkdir()

    assert resolve_asset(root, "ok.txt") == (root / "ok.txt").resolve()
    assert resolve_asset(root, "missing.txt") is None
    assert resolve_asset(root, "sub") is None  # directories are not assets
    assert resolve_asset(root, "../secret.txt") is None


def test_stored_name_with_hex_lead_survives_redirect_chain(client, settings):
    (settings.assets_dir / "cafebabe.png").write_bytes(b"\x89PNGhex")

    via_web = client.get("/web/x/http://cdn.example/deadbeefcafebabe.png")
    assert [r.headers["location"] for r in via_web.history] == ["/assets/cafebabe.png"]
    assert via_web.status_code == 200
    assert via_web.content == b"\x89PNGhex"

    direct = client.get("/assets/deadbeefcafebabe.png")
    assert direct.status_code == 200
    assert direct.content == b"\x89PNGhex"


def test_stripped_name_wins_over_literal_name(client, settings):
    (settings.assets_dir / "0123abcdlogo.png").write_bytes(b"literal")
    res = client.get("/assets/0123abcdlogo.png")
    assert res.status_code == 200
    assert res.content == b"\x89PNG\r\n\x1a\nfake"


def test_head_is_answered_on_asset_routes(client):
    found = client.head("/assets/app.js")
    assert found.status_code == 200
    assert found.headers["content-length"] == str(len("console.log('tv');"))

    missing = client.head("/assets/doesnotexist.png")
    assert missing.status_code == 404

    redirect = client.head("/web/x/http://cdn.example/abcd1234logo.png", follow_redirects=False)
    assert redirect.status_code == 302
    assert redirect.headers["location"] == "/assets/logo.png"

    folder = client.head("/assets/some-folder/app.js", follow_redirects=False)
    assert folder.status_code == 302
    assert folder.headers["location"] == "/assets/app.js"
