from respot.basic import (
    ContentRating,
    Copyright,
    ExternalId,
    Image,
    PictureSize,
    TranscodedPicture,
    convert_all,
    images_from_group,
    video_files_from_messages,
)


def test_content_rating():
    rating = ContentRating.from_message({"country": "DE", "tag": ["explicit", "mature"]})
    assert rating == ContentRating("DE", ("explicit", "mature"))


def test_content_rating_defaults():
    assert ContentRating.from_message({}) == ContentRating("", ())


def test_copyright():
    c = Copyright.from_message({"type": 1, "text": "(P) Label"})
    assert c.copyright_type == 1
    assert c.text == "(P) Label"


def test_copyright_defaults():
    assert Copyright.from_message({}) == Copyright(0, "")


def test_external_id():
    e = ExternalId.from_message({"type": "isrc", "id": "XX0000000000"})
    assert (e.external_type, e.id) == ("isrc", "XX0000000000")


def test_image_from_message():
    img = Image.from_message({"file_id": b"\xab\xcd", "size": 2, "width": 640, "height": 480})
    assert img == Image(b"\xab\xcd", 2, 640, 480)


def test_image_defaults():
    img = Image.from_message({})
    assert img.id == b""
    assert img.width == img.height == img.size == 0


def test_images_from_group_keeps_order():
    group = {"image": [{"file_id": b"\x01", "width": 64}, {"file_id": b"\x02", "width": 300}]}
    images = images_from_group(group)
    assert [i.id for i in images] == [b"\x01", b"\x02"]
    assert [i.width for i in images] == [64, 300]


def test_images_from_empty_group():
    assert images_from_group({}) == []


def test_picture_size():
    p = PictureSize.from_message({"target_name": "large", "url": "https://img.example.com/a"})
    assert p == PictureSize("large", "https://img.example.com/a")


def test_transcoded_picture():
    t = TranscodedPicture.from_message({"target_name": "small", "uri": "spotify:image:ab"})
    assert t.uri == "spotify:image:ab"
    assert t.target_name == "small"


def test_video_files():
    assert video_files_from_messages([{"file_id": b"\x10"}, {"file_id": b"\x20"}]) == [
        b"\x10",
        b"\x20",
    ]


def test_convert_all_preserves_order_and_length():
    msgs = [{"country": c} for c in ("SE", "NO", "DK")]
    ratings = convert_all(msgs, ContentRating.from_message)
    assert [r.country for r in ratings] == ["SE", "NO", "DK"]


def test_convert_all_empty():
    assert convert_all([], Copyright.from_message) == []