"""Tests for the XMP sidecar reader."""

from datetime import datetime
from pathlib import Path

from photognome.metadata.xmp import collect_xmp_values, read_xmp_metadata

ATTRIBUTE_XMP = """<?xpacket begin="" id="W5M0MpCehiHzreSzNTczkc9d"?>
<x:xmpmeta xmlns:x="adobe:ns:meta/">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
  <rdf:Description rdf:about=""
    xmlns:tiff="http://ns.adobe.com/tiff/1.0/"
    xmlns:exif="http://ns.adobe.com/exif/1.0/"
    xmlns:exifEX="http://cipa.jp/exif/1.0/"
    tiff:Make="FUJIFILM"
    tiff:Model="X-T5"
    exif:DateTimeOriginal="2026-02-08T10:20:30"
    exifEX:LensMake="FUJIFILM"
    exifEX:LensModel="XF33mmF1.4 R LM WR"/>
 </rdf:RDF>
</x:xmpmeta>
<?xpacket end="w"?>"""

ELEMENT_XMP = """<x:xmpmeta xmlns:x="adobe:ns:meta/">
 <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
  <rdf:Description rdf:about=""
    xmlns:tiff="http://ns.adobe.com/tiff/1.0/"
    xmlns:xmp="http://ns.adobe.com/xap/1.0/"
    xmlns:aux="http://ns.adobe.com/exif/1.0/aux/">
   <tiff:Make>SONY</tiff:Make>
   <tiff:Model>
    <rdf:Alt><rdf:li xml:lang="x-default">ILCE-7M4</rdf:li></rdf:Alt>
   </tiff:Model>
   <xmp:CreateDate>2025-12-31T23:59:58</xmp:CreateDate>
   <aux:Lens>FE 35mm F1.8</aux:Lens>
  </rdf:Description>
 </rdf:RDF>
</x:xmpmeta>"""


def test_reads_attribute_form(tmp_path: Path) -> None:
    path = tmp_path / "IMG_0001.xmp"
    path.write_text(ATTRIBUTE_XMP, encoding="utf-8")

    meta = read_xmp_metadata(path)

    assert meta.captured_at == datetime(2026, 2, 8, 10, 20, 30)
    assert meta.camera_maker == "FUJIFILM"
    assert meta.camera_model == "X-T5"
    assert meta.lens_maker == "FUJIFILM"
    assert meta.lens_model == "XF33mmF1.4 R LM WR"
    assert meta.film_simulation is None


def test_reads_element_form_and_rdf_alt(tmp_path: Path) -> None:
    path = tmp_path / "DSC0001.xmp"
    path.write_text(ELEMENT_XMP, encoding="utf-8")

    meta = read_xmp_metadata(path)

    assert meta.camera_maker == "SONY"
    assert meta.camera_model == "ILCE-7M4"
    assert meta.captured_at == datetime(2025, 12, 31, 23, 59, 58)
    assert meta.lens_model == "FE 35mm F1.8"


def test_undeclared_prefixes_fall_back_to_loose_scan() -> None:
    broken = '<rdf:Description tiff:Make="Canon &amp; Co"><tiff:Model>R5</tiff:Model>'

    values = collect_xmp_values(broken)

    assert values["make"] == "Canon & Co"
    assert values["model"] == "R5"


def test_leading_junk_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "IMG_0002.xmp"
    path.write_text("\ufeff  " + ATTRIBUTE_XMP, encoding="utf-8")

    assert read_xmp_metadata(path).camera_model == "X-T5"


def test_empty_sidecar_yields_empty_metadata(tmp_path: Path) -> None:
    path = tmp_path / "empty.xmp"
    path.write_text("<x:xmpmeta xmlns:x='adobe:ns:meta/'/>", encoding="utf-8")

    assert read_xmp_metadata(path).is_empty()
