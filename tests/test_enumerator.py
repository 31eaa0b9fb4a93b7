from pathlib import Path

import pytest

from skillscan.utils import PathNotFound, iter_code_files


def touch(root: Path, relative: str, content: str = "// code\n") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def relative_names(root: Path, paths):
    return sorted(path.relative_to(root.resolve()).as_posix() for path in paths)


def test_yields_only_matching_extensions(tmp_path):
    touch(tmp_path, "Program.cs")
    touch(tmp_path, "Controllers/ProductsController.CS")
    touch(tmp_path, "appsettings.json", "{}")
    touch(tmp_path, "README.md", "# docs")

    found = relative_names(tmp_path, iter_code_files(tmp_path))

    assert found == ["Controllers/ProductsController.CS", "Program.cs"]


def test_build_and_package_directories_are_excluded_at_any_depth(tmp_path):
    touch(tmp_path, "src/Api/Program.cs")
    touch(tmp_path, "src/Api/bin/Debug/net8.0/Generated.cs")
    touch(tmp_path, "src/Api/obj/Api.AssemblyInfo.cs")
    touch(tmp_path, "packages/Newtonsoft.Json/lib/Json.cs")
    touch(tmp_path, "deep/nested/tree/obj/x/y/Temp.cs")

    found = relative_names(tmp_path, iter_code_files(tmp_path))

    assert found == ["src/Api/Program.cs"]


def test_root_inside_excluded_directory_yields_nothing(tmp_path):
    root = tmp_path / "bin" / "project"
    touch(root, "Service.cs")

    assert list(iter_code_files(root)) == []


def test_exclusions_ignore_directory_case(tmp_path):
    touch(tmp_path, "Bin/Debug/Gen.cs")
    touch(tmp_path, "OBJ/Gen2.cs")
    touch(tmp_path, "Packages/Lib/Vendor.cs")
    touch(tmp_path, "Api/Program.cs")

    found = relative_names(tmp_path, iter_code_files(tmp_path))
    custom = relative_names(tmp_path, iter_code_files(tmp_path, exclude_dirs={"API"}))

    assert found == ["Api/Program.cs"]
    assert custom == ["Bin/Debug/Gen.cs", "OBJ/Gen2.cs", "Packages/Lib/Vendor.cs"]


def test_custom_extensions_and_exclusions(tmp_path):
    touch(tmp_path, "Views/Index.cshtml")
    touch(tmp_path, "generated/Client.cs")
    touch(tmp_path, "Program.cs")

    found = relative_names(
        tmp_path,
        iter_code_files(tmp_path, extensions=("cs", ".cshtml"), exclude_dirs={"generated"}),
    )

    assert found == ["Program.cs", "Views/Index.cshtml"]


def test_missing_root_raises_before_iteration(tmp_path):
    missing = tmp_path / "does-not-exist"

    with pytest.raises(PathNotFound) as excinfo:
        iter_code_files(missing)

    assert "does-not-exist" in str(excinfo.value)


def test_file_root_is_rejected(tmp_path):
    file_root = touch(tmp_path, "Program.cs")

    with pytest.raises(PathNotFound):
        iter_code_files(file_root)
