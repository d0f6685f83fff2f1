import sys

import dxftag


def main(path: str, output: str) -> None:
    with dxftag.read(path) as doc:
        print(f"{path}: {doc.version.tag} ({doc.version.release})")
        for kind, count in doc.record_counts().items():
            print(f"  {kind}: {count}")

        doc.write(output, "R12")
        for diagnostic in doc.diagnostics:
            print("  ", diagnostic)
    print(f"saved: {output}")


if __name__ == "__main__":
    main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else "out_r12.dxf")
