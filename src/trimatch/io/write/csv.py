"""Module to write per-event matching logs to CSV."""

import os

__all__ = ["CSVWriter"]


class CSVWriter:
    """Writes data to a CSV file.

    Builds a CSV file which stores one row per processed event. It can only
    be used to store relatively basic quantities (scalars, strings, etc.).
    Dictionaries are flattened into `<key>_<subkey>` columns and lists are
    replaced by their length.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: csv
            file_name: output.csv
    """

    name = "csv"

    def __init__(
        self,
        file_name="output.csv",
        overwrite=False,
        append=False,
        accept_missing=False,
        keys=None,
    ):
        """Initialize the basics of the output file.

        Parameters
        ----------
        file_name : str, default 'output.csv'
            Name of the output CSV file
        overwrite : bool, default False
            If True, overwrite the output file if it already exists
        append : bool, default False
            If True, add more rows to an existing CSV file
        accept_missing : bool, default False
            Tolerate missing keys
        keys : List[str], optional
            Keys of the data dictionary to store. If not specified, stores
            the event index and every matching product.
        """
        # Check that output file does not already exist, if requested
        if not overwrite and not append and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        # Store persistent attributes
        self.file_name = file_name
        self.append_file = append
        self.accept_missing = accept_missing
        self.keys = keys
        self.result_keys = None
        if self.append_file:
            if not os.path.isfile(file_name):
                raise FileNotFoundError(
                    f"File not found at path: {file_name}. When using "
                    "`append=True` in CSVWriter, the file must exist at "
                    "the prescribed path before data is written to it."
                )

            with open(self.file_name, "r", encoding="utf-8") as out_file:
                self.result_keys = out_file.readline().strip().split(",")

    def __call__(self, data):
        """Flatten the requested data products and append them as a row.

        Parameters
        ----------
        data : dict
            Dictionary of data products
        """
        keys = self.keys
        if keys is None:
            keys = ["index"] + [k for k in data if k.startswith("match_")]

        self.append(self.flatten({k: data[k] for k in keys if k in data}))

    @classmethod
    def flatten(cls, blob, prefix=""):
        """Flatten a nested dictionary into a single level of scalars.

        Parameters
        ----------
        blob : dict
            Dictionary to flatten
        prefix : str, default ''
            Prefix to prepend to each key

        Returns
        -------
        dict
            Flat dictionary
        """
        flat = {}
        for key, value in blob.items():
            name = f"{prefix}{key}"
            if isinstance(value, dict):
                flat.update(cls.flatten(value, prefix=f"{name}_"))
            elif isinstance(value, (list, tuple)):
                flat[name] = len(value)
            else:
                flat[name] = value

        return flat

    def create(self, result_blob):
        """Initialize the header of the CSV file, record the keys to be stored.

        Parameters
        ----------
        result_blob : dict
            Dictionary containing one row of output
        """
        # Save the list of keys to store
        self.result_keys = list(result_blob.keys())

        # Create a header and write it to file
        with open(self.file_name, "w", encoding="utf-8") as out_file:
            header_str = ",".join(self.result_keys)
            out_file.write(header_str + "\n")

    def append(self, result_blob):
        """Append the CSV file with the output.

        Parameters
        ----------
        result_blob : dict
            Dictionary containing one row of output
        """
        if self.result_keys is None:
            # If this function has never been called, initialize the CSV file
            self.create(result_blob)

        elif list(result_blob.keys()) != self.result_keys:
            # If the list of keys changed, check the discrepancies
            missing = self.array_diff(self.result_keys, result_blob.keys())
            excess = self.array_diff(result_blob.keys(), self.result_keys)
            if len(excess):
                raise AssertionError(
                    "There are keys in this entry which were not "
                    "present when the CSV file was initialized. "
                    f"New keys: {list(excess)}"
                )

            if len(missing) and not self.accept_missing:
                raise AssertionError(
                    "There are keys missing in this entry which were "
                    "present when the CSV file was initialized. "
                    f"Missing keys: {list(missing)}"
                )

            new_result_blob = {k: -1 for k in self.result_keys}
            new_result_blob.update(result_blob)
            result_blob = new_result_blob

        # Append file
        with open(self.file_name, "a", encoding="utf-8") as out_file:
            result_str = ",".join([str(result_blob[k]) for k in self.result_keys])
            out_file.write(result_str + "\n")

    @staticmethod
    def array_diff(array_x, array_y):
        """Returns the elements of the first array absent from the second.

        Parameters
        ----------
        array_x : List[str]
            First array of strings
        array_y : List[str]
            Second array of strings

        Returns
        -------
        Set[str]
            Set of keys that appear in `array_x` but not in `array_y`.
        """
        return set(array_x).difference(set(array_y))
