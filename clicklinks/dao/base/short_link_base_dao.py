"""Abstract base class for ShortLink data access objects (DAOs).

This class establishes a consistent contract for all ShortLink DAO implementations,
regardless of the underlying storage mechanism (e.g., in-memory mapping, Redis).

Responsibilities:
    - Provide an interface for inserting and retrieving ShortLinkModel objects.
    - Own shortcode uniqueness: insert() is an atomic insert-if-absent.
    - Own click ledger atomicity: append_click() never loses or tears a click.
    - Standardize error handling across multiple data store implementations.

The DAO is the only synchronization point of the application. Callers never
lock around DAO calls and never implement uniqueness via exists() + insert().

Example:
    Typical usage with a datastore-specific implementation:

        >>> from clicklinks.models import ShortLinkModel, ClickEventModel
        >>> from clicklinks.dao.memory import ShortLinkMemoryDAO

        >>> dao = ShortLinkMemoryDAO()
        >>> dao.insert(short_link)
        <ShortLinkMemoryDAO records=1>

        >>> dao.get('a1b2c3').target
        'https://example.com/blog/article-123'

        >>> dao.append_click('a1b2c3', ClickEventModel(ts=now))
        1
"""

from abc import ABC, abstractmethod

from clicklinks.models import ShortLinkModel, ClickEventModel


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        exists(shortcode: str, **kwargs) -> bool:
            Check whether a shortcode has been allocated (live or expired).

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a ShortLinkModel (with its clicks) by shortcode.
            Raises ShortLinkNotFoundError if the entry does not exist.

        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkBaseDAO:
            Atomically insert a ShortLinkModel if its shortcode is free.
            Raises ShortLinkAlreadyExistsError if the shortcode already exists.

        append_click(shortcode: str, click: ClickEventModel, **kwargs) -> int:
            Atomically append a click to the link's ledger.
            Raises ShortLinkNotFoundError if the entry does not exist.

        All methods raise DataStoreError on connection, read or write failure.

    NOTE:
        - Links are never deleted. Expired links stay retrievable for statistics.
        - Duplicate inserts are rejected, never overwritten.
    """

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether a short link with the given shortcode exists.

        Args:
            shortcode (str):
                The shortcode to look up.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool: True if the shortcode is allocated, False otherwise.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a ShortLinkModel from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the ShortLinkModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The stored link including its recorded clicks.

        Raises:
            ShortLinkNotFoundError:
                If no ShortLinkModel with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkBaseDAO':
        """Insert a new ShortLinkModel into the data store if its shortcode is free.

        The existence check and the write are a single atomic step: of any
        number of concurrent inserts for the same shortcode, exactly one succeeds.

        Args:
            short_link (ShortLinkModel):
                The ShortLinkModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a ShortLinkModel with the same shortcode already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def append_click(self, shortcode: str, click: ClickEventModel, **kwargs) -> int:
        """Append a click to the ledger of an existing short link.

        Args:
            shortcode (str):
                The shortcode of the visited link.

            click (ClickEventModel):
                The visit to record.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: Total number of clicks recorded for the link after the append.

        Raises:
            ShortLinkNotFoundError:
                If no ShortLinkModel with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
